"""Config store: parsing the named ranges of the Config sheet."""
import pytest

from team_survey.config import ConfigStore
from team_survey.errors import ConfigurationMissingError
from team_survey.template import create_workbook
from team_survey.workbook import WorkbookStore


@pytest.fixture
def config(store):
    return ConfigStore(store, verbose=False)


def test_defaults_from_template(config):
    obj = config.get_obj()
    assert obj[ConfigStore.FORM_TITLE] == ConfigStore.DEFAULTS[ConfigStore.FORM_TITLE]
    assert obj[ConfigStore.FORM_ID] == ''
    assert obj[ConfigStore.NUM_PREFERRED_STUDENTS] == 2
    assert obj[ConfigStore.PROFICIENCY_QUESTIONS] == ['Q1', 'Q2']


def test_values_are_cached_until_reset(config, store):
    assert config.get(ConfigStore.FORM_TITLE) == 'Team Formation Survey'
    store.set_named_value(ConfigStore.FORM_TITLE, 'Changed')
    assert config.get(ConfigStore.FORM_TITLE) == 'Team Formation Survey'
    config.reset()
    assert config.get(ConfigStore.FORM_TITLE) == 'Changed'


def test_list_values_skip_blank_entries(store):
    sheet_name, col, row, _, _ = store.get_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    store.add_row_to_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    store.add_row_to_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    store.set_cell(sheet_name, row + 3, col, '  Q4 ')

    assert ConfigStore(store, verbose=False).get(ConfigStore.PROFICIENCY_QUESTIONS) == ['Q1', 'Q2', 'Q4']


@pytest.mark.parametrize('raw, expected', [(3, 3), ('4', 4), (2.0, 2), (0, 0)])
def test_numeric_values_parse(store, raw, expected):
    store.set_named_value(ConfigStore.NUM_DISLIKED_STUDENTS, raw)
    assert ConfigStore(store, verbose=False).get(ConfigStore.NUM_DISLIKED_STUDENTS) == expected


@pytest.mark.parametrize('key', [ConfigStore.NUM_PREFERRED_STUDENTS, ConfigStore.NUM_DISLIKED_STUDENTS])
@pytest.mark.parametrize('raw', [None, '', '   '])
def test_blank_required_count_raises(store, key, raw):
    store.set_named_value(key, raw)
    with pytest.raises(ConfigurationMissingError, match=key):
        ConfigStore(store, verbose=False).get_obj()


def test_blank_proficiency_questions_raise(store):
    sheet_name, col, row, _, max_row = store.get_named_range(ConfigStore.PROFICIENCY_QUESTIONS)
    for row_num in range(row, max_row + 1):
        store.set_cell(sheet_name, row_num, col, '  ')
    with pytest.raises(ConfigurationMissingError, match=ConfigStore.PROFICIENCY_QUESTIONS):
        ConfigStore(store, verbose=False).get_obj()


def test_blank_optional_value_reads_as_empty(store):
    store.set_named_value(ConfigStore.FORM_DESCRIPTION, None)
    assert ConfigStore(store, verbose=False).get(ConfigStore.FORM_DESCRIPTION) == ''


def test_set_blank_required_value_raises(config, store):
    with pytest.raises(ConfigurationMissingError):
        config.set_value(ConfigStore.NUM_PREFERRED_STUDENTS, '')
    with pytest.raises(ConfigurationMissingError):
        config.set_value(ConfigStore.PROFICIENCY_QUESTIONS, ['', ' '])
    assert config.get(ConfigStore.NUM_PREFERRED_STUDENTS) == 2
    assert store.get_named_value(ConfigStore.NUM_PREFERRED_STUDENTS) == 2


@pytest.mark.parametrize('raw', [-1, 'two', 1.5])
def test_invalid_numeric_values_raise(store, raw):
    store.set_named_value(ConfigStore.NUM_PREFERRED_STUDENTS, raw)
    with pytest.raises(ConfigurationMissingError, match=ConfigStore.NUM_PREFERRED_STUDENTS):
        ConfigStore(store, verbose=False).get_obj()


def test_blank_title_raises(store):
    store.set_named_value(ConfigStore.FORM_TITLE, '  ')
    with pytest.raises(ConfigurationMissingError, match=ConfigStore.FORM_TITLE):
        ConfigStore(store, verbose=False).get_obj()


def test_missing_required_named_range_raises(store):
    del store.wb.defined_names[ConfigStore.NUM_DISLIKED_STUDENTS]
    with pytest.raises(ConfigurationMissingError):
        ConfigStore(store, verbose=False).get_obj()


def test_missing_optional_named_range_defaults(store):
    del store.wb.defined_names[ConfigStore.FORM_DESCRIPTION]
    assert ConfigStore(store, verbose=False).get(ConfigStore.FORM_DESCRIPTION) == ''


def test_set_value_writes_through(config, store):
    config.set_value(ConfigStore.FORM_ID, 'abc123')
    assert config.get(ConfigStore.FORM_ID) == 'abc123'
    assert store.get_named_value(ConfigStore.FORM_ID) == 'abc123'


def test_set_list_value_fills_range(config, store):
    config.set_value(ConfigStore.PROFICIENCY_QUESTIONS, ['Only one', ''])
    assert store.get_named_range_values(ConfigStore.PROFICIENCY_QUESTIONS) == [['Only one'], [None]]
    with pytest.raises(ValueError):
        config.set_value(ConfigStore.PROFICIENCY_QUESTIONS, ['a', 'b', 'c'])
    assert config.get(ConfigStore.PROFICIENCY_QUESTIONS) == ['Only one']
    assert store.get_named_range_values(ConfigStore.PROFICIENCY_QUESTIONS) == [['Only one'], [None]]


def test_rejected_list_value_leaves_cache_alone(config):
    with pytest.raises(ValueError):
        config.set_value(ConfigStore.PROFICIENCY_QUESTIONS, ['a', 'b', 'c'])
    assert config.get(ConfigStore.PROFICIENCY_QUESTIONS) == ['Q1', 'Q2']


def test_require_blank_raises(config):
    with pytest.raises(ConfigurationMissingError, match=ConfigStore.FORM_ID):
        config.require(ConfigStore.FORM_ID)


def test_saved_workbook_keeps_named_ranges(tmp_path):
    path = str(tmp_path / 'survey.xlsx')
    create_workbook(path, proficiency_questions=['A', 'B', 'C'], verbose=False)
    config = ConfigStore(WorkbookStore(path, verbose=False), verbose=False)
    assert config.get(ConfigStore.PROFICIENCY_QUESTIONS) == ['A', 'B', 'C']
