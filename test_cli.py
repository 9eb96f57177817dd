"""Command line: each subcommand runs against a freshly opened workbook."""
import os

from team_survey import items
from team_survey.cli import main
from team_survey.config import ConfigStore
from team_survey.session import SurveySession


def run(file_session, *argv):
    workbook_path, forms_dir = file_session
    return main(['--workbook', workbook_path, '--forms-dir', forms_dir, '--quiet'] + list(argv))


def test_build_and_compile(file_session, capsys):
    assert run(file_session, 'create-form') == 0
    assert run(file_session, 'update-form') == 0
    assert run(file_session, 'add-test-responses', '--seed', '9') == 0
    assert run(file_session, 'generate-results') == 0

    out = capsys.readouterr().out
    assert 'Submitted 4 test responses' in out
    assert "Results written to 'Results - " in out

    session = SurveySession.open(*file_session, verbose=False)
    assert len(session.students().get_respondents()) == 4
    assert any(name.startswith('Results - ') for name in session.store.wb.sheetnames)
    assert session.registry.is_registered(items.AVAILABILITY_QUESTION)


def test_form_id_survives_between_invocations(file_session):
    run(file_session, 'create-form')
    session = SurveySession.open(*file_session, verbose=False)
    form_id = session.config.get(ConfigStore.FORM_ID)
    assert form_id != ''
    assert os.path.exists(os.path.join(file_session[1], f'{form_id}.json'))


def test_errors_exit_non_zero(file_session, capsys):
    assert run(file_session, 'update-form') == 1
    assert 'No form ID is specified' in capsys.readouterr().err

    run(file_session, 'create-form')
    assert run(file_session, 'create-form') == 1
    assert 'already specified' in capsys.readouterr().err


def test_lost_form_file_is_reported_and_can_be_deleted(file_session, capsys):
    run(file_session, 'create-form')
    form_id = SurveySession.open(*file_session, verbose=False).config.get(ConfigStore.FORM_ID)
    os.remove(os.path.join(file_session[1], f'{form_id}.json'))

    assert run(file_session, 'update-form') == 1
    assert f'Form {form_id} does not exist' in capsys.readouterr().err

    assert run(file_session, 'delete-form') == 0
    assert SurveySession.open(*file_session, verbose=False).config.get(ConfigStore.FORM_ID) == ''
    assert run(file_session, 'create-form') == 0


def test_failed_action_does_not_save(file_session):
    run(file_session, 'create-form')
    before = os.path.getmtime(file_session[0])
    assert run(file_session, 'add-test-response', 'nobody') == 1
    assert os.path.getmtime(file_session[0]) == before


def test_single_test_response(file_session, capsys):
    run(file_session, 'create-form')
    run(file_session, 'update-form')
    assert run(file_session, 'add-test-response', 'CWei', '--seed', '1') == 0
    assert 'Submitted a test response for cwei' in capsys.readouterr().out


def test_export(file_session, tmp_path):
    run(file_session, 'create-form')
    run(file_session, 'update-form')
    export_path = str(tmp_path / 'results.csv')
    assert run(file_session, 'generate-results', '--export', export_path) == 0
    assert os.path.exists(export_path)


def test_proficiency_rows(file_session):
    assert run(file_session, 'add-proficiency-row') == 0
    session = SurveySession.open(*file_session, verbose=False)
    assert session.store.get_named_range(ConfigStore.PROFICIENCY_QUESTIONS)[2:] == (6, 2, 8)

    assert run(file_session, 'remove-proficiency-row') == 0
    assert run(file_session, 'remove-proficiency-row') == 0
    # A named range keeps at least one row
    assert run(file_session, 'remove-proficiency-row') == 1


def test_missing_workbook(tmp_path, capsys):
    assert main(['--workbook', str(tmp_path / 'none.xlsx'), '--quiet', 'create-form']) == 1
    assert 'Workbook not found' in capsys.readouterr().err


def test_init_workbook(tmp_path):
    path = str(tmp_path / 'new.xlsx')
    assert main(['--workbook', path, '--quiet', 'init-workbook']) == 0
    session = SurveySession.open(path, str(tmp_path / 'forms'), verbose=False)
    assert session.config.get(ConfigStore.PROFICIENCY_QUESTIONS) == \
        ConfigStore.DEFAULTS[ConfigStore.PROFICIENCY_QUESTIONS]
