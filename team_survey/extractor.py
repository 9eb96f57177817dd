"""
Response Extractor
==================

Decodes one form response into the student record of the student who
submitted it.

Each response only ever touches the record matched by its own ASUrite ID
answer, so responses can be processed in any order. All answers are decoded
before the record is changed: a response that fails to decode leaves its
record as it was. Every field a response covers is replaced, so a blank
answer in a later response clears what an earlier one gave.
"""

from datetime import datetime
from typing import Dict, List

from team_survey import items
from team_survey.errors import UnknownRespondentError, UnknownTeammateError
from team_survey.form_host import FormResponse
from team_survey.registry import FormItemRegistry
from team_survey.roster import new_student_record


class ResponseExtractor:
    """Reads responses through the form item registry."""

    def __init__(self, registry: FormItemRegistry, time_strings: List[str], verbose: bool = True):
        """
        Args:
            registry: Where the physical item IDs of each logical item are stored
            time_strings: Rows of the availability grid, in grid order
            verbose: Whether to print progress messages
        """
        self.registry = registry
        self.time_strings = list(time_strings)
        self.verbose = verbose

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def get_respondent_id(self, response: FormResponse) -> str:
        item_id = self.registry.lookup_single(items.ASURITE_QUESTION)
        return items.ITEMS[items.ASURITE_QUESTION].decode(response.get_response_for_item(item_id))

    def extract(self, students: Dict[str, dict], response: FormResponse) -> dict:
        """
        Decodes `response` into the matching record of `students`.

        Returns:
            The updated student record

        Raises:
            UnknownRespondentError: if the ASUrite ID answer is not on the roster
            UnknownTeammateError: if a teammate choice is not on the roster
            UnregisteredItemError: if a logical item has no stored form item IDs
        """
        # ========== RESPONDENT ==========
        student_id = self.get_respondent_id(response)
        if student_id not in students:
            raise UnknownRespondentError(student_id, response.id)

        update = {'responded': True, 'submitted_at': response.timestamp}

        # ========== SCALAR ANSWERS ==========
        defaults = new_student_record(student_id, '')
        for item_name in items.SCALAR_ITEMS:
            descriptor = items.ITEMS[item_name]
            value = descriptor.decode(response.get_response_for_item(self.registry.lookup_single(item_name)))
            update[descriptor.field] = value if value is not None else defaults[descriptor.field]

        # ========== TEAMMATES ==========
        for item_name in items.TEAMMATE_ITEMS:
            descriptor = items.ITEMS[item_name]
            teammate_ids = []
            for item_id in self.registry.lookup(item_name):
                teammate_id = descriptor.decode(response.get_response_for_item(item_id))
                if teammate_id is None:
                    continue
                if teammate_id not in students:
                    raise UnknownTeammateError(teammate_id, response.id)
                teammate_ids.append(teammate_id)
            update[descriptor.field] = teammate_ids

        # ========== AVAILABILITY ==========
        grid_id = self.registry.lookup_single(items.AVAILABILITY_QUESTION)
        grid_answer = response.get_response_for_item(grid_id)
        if grid_answer is None:
            self.log(f"  WARNING: Response {response.id} from {student_id} has no availability answer. "
                     "Marking every timeslot as unavailable.")
        update['availability'] = items.decode_availability(grid_answer, self.time_strings)

        # ========== PROFICIENCIES ==========
        descriptor = items.ITEMS[items.PROFICIENCY_QUESTIONS]
        update[descriptor.field] = [descriptor.decode(response.get_response_for_item(item_id))
                                    for item_id in self.registry.lookup(items.PROFICIENCY_QUESTIONS)]

        record = students[student_id]
        record.update(update)
        return record
