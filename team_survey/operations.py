"""
Operator actions. Each one runs against a fresh session and saves the
workbook only when it completes; a failed action leaves the workbook file as
it was.
"""

from typing import Dict, Optional

from team_survey.config import ConfigStore
from team_survey.session import SurveySession
from team_survey.template import create_workbook


def init_workbook(path: str, verbose: bool = True) -> str:
    create_workbook(path, verbose=verbose)
    return path


def import_roster(session: SurveySession, roster_path: str) -> int:
    count = session.roster.import_file(roster_path)
    session.save()
    return count


def create_form(session: SurveySession) -> str:
    """Creates a new form and stores its ID in the config."""
    form = session.builder.create()
    session.save()
    return form.id


def update_form(session: SurveySession) -> int:
    """Rebuilds the questions of the configured form."""
    form = session.builder.update_form()
    session.save()
    return len(form.get_items())


def delete_form(session: SurveySession):
    """Deletes the form, its responses, and the stored form item IDs."""
    session.builder.delete()
    session.save()


def clear_form(session: SurveySession) -> int:
    """Removes every question of the form but keeps the form."""
    return session.builder.delete_all_items()


def generate_results(session: SurveySession, export_path: Optional[str] = None) -> str:
    """
    Compiles the responses into a new results sheet.

    Args:
        session: Session to run in
        export_path: Also write the table to this .xlsx or .csv file

    Returns:
        Name of the new results sheet
    """
    students = session.students().get_all()
    compiler = session.results()
    table = compiler.compile(students)
    sheet_name = compiler.write_to_workbook(session.store, table)
    if export_path:
        compiler.export(table, export_path)
    session.save()
    return sheet_name


def add_test_response(session: SurveySession, student_id: str, seed: Optional[int] = None) -> Dict:
    return session.synthesizer(seed=seed).submit_test_response_for_student(student_id)


def add_test_responses(session: SurveySession, seed: Optional[int] = None) -> Dict[str, Dict]:
    return session.synthesizer(seed=seed).submit_test_responses_for_all_students()


def permanently_clear_responses(session: SurveySession) -> int:
    return session.builder.permanently_clear_responses()


def add_row_to_proficiency_questions(session: SurveySession):
    session.store.add_row_to_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    session.save()


def remove_row_from_proficiency_questions(session: SurveySession):
    session.store.remove_row_from_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    session.save()
