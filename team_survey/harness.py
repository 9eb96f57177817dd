"""
Test Harness
============

Submits made-up responses to the form, answering each question the way the
form builder laid it out. Used to check a freshly built form end to end
before it is sent to students.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

import numpy as np

from team_survey import items
from team_survey.date_util import get_random_utc_time_zone, get_weekday_strings, parse_utc_time_zone
from team_survey.errors import UnknownStudentError
from team_survey.form_host import Form, FormResponse
from team_survey.registry import FormItemRegistry
from team_survey.roster import Roster, normalize_id


class ResponseSynthesizer:
    """Builds and submits test responses for students on the roster."""

    def __init__(self, roster: Roster, registry: FormItemRegistry, form: Form,
                 time_strings: List[str], seed: Optional[int] = None, verbose: bool = True):
        """
        Args:
            roster: Students to answer as, and to pick teammates from
            registry: Where the physical item IDs of each logical item are stored
            form: Form to submit the responses to
            time_strings: Rows of the availability grid
            seed: Seed for the random answers
            verbose: Whether to print progress messages
        """
        self.roster = roster
        self.registry = registry
        self.form = form
        self.time_strings = list(time_strings)
        self.rng = np.random.default_rng(seed)
        self.verbose = verbose

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def synthesize(self, student_id: str, full: bool = False) -> Tuple[FormResponse, Dict]:
        """
        Builds an unsubmitted response for a student.

        Args:
            student_id: Roster ID of the respondent
            full: Answer every teammate slot. Otherwise a random number of
                slots is answered, starting with the first.

        Returns:
            The response and the answers it holds, keyed like a student record
        """
        student_id = normalize_id(student_id)
        if student_id not in self.roster.get_all():
            raise UnknownStudentError(student_id)

        response = self.form.create_response()
        expected = {'id': student_id}

        # ========== STUDENT INFORMATION ==========
        response.with_item_response(self.registry.lookup_single(items.ASURITE_QUESTION), student_id)

        email = f'{student_id}@asu.edu'
        response.with_item_response(self.registry.lookup_single(items.TAIGA_EMAIL_QUESTION), email)
        expected['contact_email'] = email

        github_username = f'{student_id}-gh'
        response.with_item_response(self.registry.lookup_single(items.GITHUB_USERNAME_QUESTION),
                                    github_username)
        expected['github_username'] = github_username

        time_zone = get_random_utc_time_zone(self.rng)
        response.with_item_response(self.registry.lookup_single(items.TIME_ZONE_QUESTION), time_zone)
        expected['utc_offset'] = parse_utc_time_zone(time_zone)

        # ========== AVAILABILITY ==========
        weekdays = get_weekday_strings()
        grid = []
        availability = []
        for _ in self.time_strings:
            checked = [day for day in weekdays if self.rng.random() < 0.4]
            grid.append(checked or None)
            availability.append({day: day in checked for day in weekdays})
        response.with_item_response(self.registry.lookup_single(items.AVAILABILITY_QUESTION), grid)
        expected['availability'] = availability

        # ========== PROFICIENCIES ==========
        proficiencies = []
        for item_id in self.registry.lookup(items.PROFICIENCY_QUESTIONS):
            score = int(self.rng.integers(1, 6))
            response.with_item_response(item_id, str(score))
            proficiencies.append(score)
        expected['proficiencies'] = proficiencies

        # ========== TEAMMATES ==========
        chosen = [student_id]
        for item_name in items.TEAMMATE_ITEMS:
            slot_ids = self.registry.lookup(item_name)
            num_answers = len(slot_ids) if full else int(self.rng.integers(0, len(slot_ids) + 1))
            teammate_ids = self.roster.get_random_ids(student_id, num_answers, rng=self.rng, exclude=chosen)
            for item_id, teammate_id in zip(slot_ids, teammate_ids):
                response.with_item_response(item_id, self.roster.get_combo_for_id(teammate_id))
            chosen.extend(teammate_ids)
            expected[items.ITEMS[item_name].field] = teammate_ids

        return response, expected

    def submit_test_response_for_student(self, student_id: str, full: bool = False) -> Dict:
        """Submits one test response and returns the answers it held."""
        response, expected = self.synthesize(student_id, full=full)
        response.submit()
        self.log(f"Submitted a test response for {expected['id']}")
        return expected

    def submit_test_responses_for_all_students(self, full: bool = False) -> Dict[str, Dict]:
        submitted = {}
        for student_id in self.roster.get_ids_sorted():
            submitted[student_id] = self.submit_test_response_for_student(student_id, full=full)
        self.log(f"Submitted {len(submitted)} test responses")
        return submitted
