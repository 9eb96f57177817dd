"""Local form host: item validation and persistence."""
import pytest

from team_survey.errors import FormNotFoundError, InvalidResponseError, SurveyError
from team_survey.form_host import GRID, LocalFormHost


@pytest.fixture
def form():
    return LocalFormHost().create_form('Survey')


def test_text_pattern(form):
    item_id = form.add_text_item('ID', pattern=r'[a-z]+')
    response = form.create_response()
    response.with_item_response(item_id, 'abc')
    assert response.get_response_for_item(item_id) == 'abc'
    with pytest.raises(InvalidResponseError):
        response.with_item_response(item_id, 'ab1')


def test_list_choices(form):
    item_id = form.add_list_item('Pick', ['a', 'b'])
    response = form.create_response()
    with pytest.raises(InvalidResponseError):
        response.with_item_response(item_id, 'c')
    response.with_item_response(item_id, 'b')
    response.with_item_response(item_id, None)
    assert response.get_response_for_item(item_id) is None


@pytest.mark.parametrize('value', ['0', '6', 'x'])
def test_scale_bounds(form, value):
    item_id = form.add_scale_item('Rate', 1, 5)
    with pytest.raises(InvalidResponseError):
        form.create_response().with_item_response(item_id, value)


def test_scale_is_stored_as_text(form):
    item_id = form.add_scale_item('Rate', 1, 5)
    response = form.create_response().with_item_response(item_id, 3)
    assert response.get_response_for_item(item_id) == '3'


def test_grid_rows(form):
    item_id = form.add_grid_item('When', rows=['r1', 'r2'], columns=['Mon', 'Tue'])
    response = form.create_response()
    response.with_item_response(item_id, [['Mon'], []])
    assert response.get_response_for_item(item_id) == [['Mon'], None]
    with pytest.raises(InvalidResponseError):
        response.with_item_response(item_id, [['Mon']])
    with pytest.raises(InvalidResponseError):
        response.with_item_response(item_id, [['Wed'], None])
    assert form.get_items(GRID)[0]['rows'] == ['r1', 'r2']


def test_page_break_takes_no_answer(form):
    item_id = form.add_page_break_item('Section')
    with pytest.raises(InvalidResponseError):
        form.create_response().with_item_response(item_id, 'x')


def test_submit_once(form):
    response = form.create_response()
    response_id = response.submit()
    assert response.timestamp is not None
    assert [r.id for r in form.get_responses()] == [response_id]
    with pytest.raises(InvalidResponseError):
        response.submit()


def test_forms_persist_in_directory(tmp_path):
    forms_dir = str(tmp_path / 'forms')
    form = LocalFormHost(forms_dir).create_form('Survey')
    item_id = form.add_text_item('Name')
    form.create_response().with_item_response(item_id, 'Anton').submit()

    reopened = LocalFormHost(forms_dir).open_form(form.id)
    assert reopened.title == 'Survey'
    assert reopened.get_responses()[0].get_response_for_item(item_id) == 'Anton'

    LocalFormHost(forms_dir).delete_form(form.id)
    with pytest.raises(KeyError):
        LocalFormHost(forms_dir).open_form(form.id)


def test_delete_items_and_responses(form):
    item_id = form.add_text_item('Name')
    form.create_response().with_item_response(item_id, 'x').submit()
    form.delete_item(item_id)
    assert not form.has_item(item_id)
    assert form.delete_all_responses() == 1
    assert form.get_responses() == []


@pytest.mark.parametrize('in_directory', [False, True])
def test_open_missing_form_raises(tmp_path, in_directory):
    host = LocalFormHost(str(tmp_path / 'forms') if in_directory else None)
    with pytest.raises(FormNotFoundError, match='Form missing does not exist') as exc_info:
        host.open_form('missing')
    assert isinstance(exc_info.value, SurveyError)
    assert exc_info.value.form_id == 'missing'
