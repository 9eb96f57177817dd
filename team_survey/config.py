"""
Config Store
============

Holds the survey settings read from the named ranges of the "Config" sheet.
The values are read the first time they are needed and cached on the
instance; a new operation builds a new `ConfigStore`.
"""

from datetime import datetime
from typing import Any, Dict, List

import pandas as pd

from team_survey.errors import ConfigurationMissingError
from team_survey.workbook import WorkbookStore


class ConfigStore:
    """Typed access to the "Config" sheet."""

    FORM_TITLE = 'formTitle'
    FORM_ID = 'formId'
    FORM_DESCRIPTION = 'formDescription'
    NUM_PREFERRED_STUDENTS = 'numPreferredStudents'
    NUM_DISLIKED_STUDENTS = 'numDislikedStudents'
    PROFICIENCY_QUESTIONS = 'proficiencyQuestions'

    # Key -> (kind, required)
    KEYS = {
        FORM_TITLE: ('str', True),
        FORM_ID: ('str', False),
        FORM_DESCRIPTION: ('str', False),
        NUM_PREFERRED_STUDENTS: ('int', True),
        NUM_DISLIKED_STUDENTS: ('int', True),
        PROFICIENCY_QUESTIONS: ('list', True),
    }

    # Values written into new workbooks by `team_survey.template`
    DEFAULTS = {
        FORM_TITLE: 'Team Formation Survey',
        FORM_ID: '',
        FORM_DESCRIPTION: 'Please fill out this survey so we can form project teams.',
        NUM_PREFERRED_STUDENTS: 2,
        NUM_DISLIKED_STUDENTS: 2,
        PROFICIENCY_QUESTIONS: ['Python', 'Git / GitHub', 'Web development'],
    }

    LABELS = {
        FORM_TITLE: 'Form Title',
        FORM_ID: 'Form ID',
        FORM_DESCRIPTION: 'Form Description',
        NUM_PREFERRED_STUDENTS: 'Number of Preferred Students',
        NUM_DISLIKED_STUDENTS: 'Number of Disliked Students',
        PROFICIENCY_QUESTIONS: 'Proficiency Questions',
    }

    def __init__(self, store: WorkbookStore, verbose: bool = True):
        self.store = store
        self.verbose = verbose
        self.config_obj = None

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def reset(self):
        """Drop the cached values so the next read goes to the sheet."""
        self.config_obj = None

    def get_obj(self) -> Dict[str, Any]:
        """
        Gets the complete config object, populated with values from the
        "Config" sheet.

        Raises:
            ConfigurationMissingError: if a required key has no named range,
                is blank, or does not parse
        """
        if self.config_obj is None:
            self.config_obj = self._create_config_obj()
        return self.config_obj

    def get(self, key: str) -> Any:
        if key not in self.KEYS:
            raise KeyError(f'Unknown config key: {key}')
        return self.get_obj()[key]

    def require(self, key: str) -> Any:
        """Like `get`, but a blank string or empty list is an error."""
        value = self.get(key)
        if value == '' or value == []:
            raise ConfigurationMissingError(key)
        return value

    def set_value(self, key: str, new_value: Any):
        """
        Sets the value for the given config key. If the key has a named range
        on the "Config" sheet, the sheet is updated too.
        """
        if key not in self.KEYS:
            raise KeyError(f'Unknown config key: {key}')
        config_obj = self.get_obj()

        kind, required = self.KEYS[key]
        if kind == 'list':
            new_value = self._parse_list([new_value])
        elif kind == 'int':
            new_value = self._parse_int(key, new_value, required)
        else:
            new_value = '' if new_value is None else str(new_value).strip()
        if required and (new_value == '' or new_value == []):
            raise ConfigurationMissingError(key)

        # The sheet is written first; the cached value only changes once it holds
        if self.store.has_named_range(key):
            if kind == 'list':
                sheet_name, min_col, min_row, _, max_row = self.store.get_named_range(key)
                num_rows = max_row - min_row + 1
                if len(new_value) > num_rows:
                    raise ValueError(f"'{key}' holds {num_rows} rows, cannot store {len(new_value)} values")
                padded = new_value + [None] * (num_rows - len(new_value))
                self.store.set_range_values(sheet_name, min_row, min_col, [[v] for v in padded])
            else:
                self.store.set_named_value(key, new_value)

        config_obj[key] = new_value
        self.log(f"Config value '{key}' set")

    # ========== PARSING ==========

    def _create_config_obj(self) -> Dict[str, Any]:
        config_obj = {}
        for key, (kind, required) in self.KEYS.items():
            if not self.store.has_named_range(key):
                if required:
                    raise ConfigurationMissingError(key)
                config_obj[key] = [] if kind == 'list' else ('' if kind == 'str' else 0)
                continue

            if kind == 'list':
                value = self._parse_list(self.store.get_named_range_values(key))
            elif kind == 'int':
                value = self._parse_int(key, self.store.get_named_value(key), required)
            else:
                value = self.store.get_named_value(key)
                value = '' if pd.isna(value) else str(value).strip()

            if required and (value == '' or value == []):
                raise ConfigurationMissingError(key)
            config_obj[key] = value

        return config_obj

    @staticmethod
    def _parse_list(values: List[List[Any]]) -> List[str]:
        entries = []
        for row in values:
            for value in row:
                if pd.notna(value) and str(value).strip() != '':
                    entries.append(str(value).strip())
        return entries

    @staticmethod
    def _parse_int(key: str, value: Any, required: bool = False) -> int:
        """Blank is 0 for optional keys and missing for required ones."""
        if pd.isna(value) or (isinstance(value, str) and value.strip() == ''):
            if required:
                raise ConfigurationMissingError(key)
            return 0
        try:
            number = float(value)
        except (ValueError, TypeError):
            raise ConfigurationMissingError(key, f'{value!r} is not a number')
        if number < 0 or number != int(number):
            raise ConfigurationMissingError(key, f'{value!r} is not a non-negative whole number')
        return int(number)
