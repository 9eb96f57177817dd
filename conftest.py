import pytest

from team_survey.config import ConfigStore
from team_survey.form_host import LocalFormHost
from team_survey.session import SurveySession
from team_survey.template import create_workbook

STUDENTS = [
    ['Anton Neuhold', 'aneuhold'],
    ['Bea Lopez', 'blopez2'],
    ['Chen Wei', 'cwei'],
    ['Dana Scott', 'dscott7'],
]


@pytest.fixture
def store():
    """In-memory survey workbook with four students and two proficiency questions."""
    return create_workbook(proficiency_questions=['Q1', 'Q2'], students=STUDENTS, verbose=False)


@pytest.fixture
def session(store):
    return SurveySession(store, LocalFormHost(), verbose=False)


@pytest.fixture
def built_session(session):
    """Session whose form has been created and built."""
    session.builder.create()
    session.builder.update_form()
    return session


@pytest.fixture
def file_session(tmp_path):
    """Workbook and forms stored on disk, for tests that reopen them."""
    workbook_path = str(tmp_path / 'survey.xlsx')
    forms_dir = str(tmp_path / 'forms')
    create_workbook(workbook_path, proficiency_questions=['Q1', 'Q2'], students=STUDENTS, verbose=False)
    return workbook_path, forms_dir


def set_counts(session, preferred, disliked):
    session.config.set_value(ConfigStore.NUM_PREFERRED_STUDENTS, preferred)
    session.config.set_value(ConfigStore.NUM_DISLIKED_STUDENTS, disliked)
