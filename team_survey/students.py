"""
Students: roster records merged with every response currently on the form.
"""

from datetime import datetime
from typing import Dict, List, Optional

from team_survey.extractor import ResponseExtractor
from team_survey.form_host import Form
from team_survey.roster import Roster


class Students:
    """Builds the full student records for one operation."""

    def __init__(self, roster: Roster, extractor: ResponseExtractor, form: Optional[Form] = None,
                 verbose: bool = True):
        """
        Args:
            roster: The roster the records start from
            extractor: Decodes each response into its record
            form: Form to read responses from. Without one, the records hold
                roster information only.
            verbose: Whether to print progress messages
        """
        self.roster = roster
        self.extractor = extractor
        self.form = form
        self.verbose = verbose
        self._students = None

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def reset(self):
        self._students = None

    def get_all(self) -> Dict[str, dict]:
        """
        Student records keyed by ID, in roster order. Built once per instance.

        Responses are applied oldest first, so when a student submitted more
        than once their latest response is the one that counts.
        """
        if self._students is None:
            self._students = self._create_students()
        return self._students

    def get_by_id(self, student_id: str) -> dict:
        return self.get_all()[student_id.strip().lower()]

    def get_respondents(self) -> List[str]:
        return self.get_respondents_in(self.get_all())

    def _create_students(self) -> Dict[str, dict]:
        students = self.roster.fresh_records()
        if self.form is None:
            return students

        responses = self.form.get_responses()
        if len(responses) == 0:
            self.log("The form has no responses yet")
            return students

        ordered = sorted(enumerate(responses), key=lambda pair: (pair[1].timestamp or '', pair[0]))
        for _, response in ordered:
            self.extractor.extract(students, response)

        self.log(f"Extracted {len(responses)} responses for {len(self.get_respondents_in(students))} "
                 f"of {len(students)} students")
        return students

    @staticmethod
    def get_respondents_in(students: Dict[str, dict]) -> List[str]:
        return [student_id for student_id, record in students.items() if record['responded']]
