"""
Student Roster
==============

Reads the "Students" sheet into student records keyed by their ID
(lowercased and trimmed). The first column holds the full name, the second
column the ID; any further columns are ignored.

Also holds the "id - Full Name" combo strings used as the choices of the
teammate questions, and random teammate selection for test responses.
"""

from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from team_survey.errors import DuplicateIdentifierError, EmptyIdentifierError
from team_survey.workbook import WorkbookStore

COMBO_DELIMITER = ' - '


def normalize_id(value) -> str:
    """Student IDs are compared trimmed and lowercased."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return str(value).strip().lower()


def create_id_name_combo_string(student_id: str, full_name: str) -> str:
    """
    The ID, name combo string, for example `aneuhold - Anton Neuhold`.
    """
    return f'{student_id}{COMBO_DELIMITER}{full_name}'


def get_id_from_name_combo_string(combo: str) -> str:
    """Pulls the ID out of a string made by `create_id_name_combo_string`."""
    return normalize_id(str(combo).split(COMBO_DELIMITER, 1)[0])


def new_student_record(student_id: str, full_name: str) -> dict:
    """A student record with every response field at its default."""
    return {
        'id': student_id,
        'full_name': full_name,
        'github_username': '',
        'contact_email': '',
        'utc_offset': None,
        'proficiencies': [],
        'preferred_students': [],
        'disliked_students': [],
        'availability': [],
        'responded': False,
        'submitted_at': None,
    }


class Roster:
    """The students of the course as listed on the "Students" sheet."""

    NAME_COLUMN = 0
    ID_COLUMN = 1
    HEADERS = ['Full Name', 'ASUrite ID']

    def __init__(self, store: WorkbookStore, strict: bool = False, verbose: bool = True):
        """
        Args:
            store: Workbook holding the "Students" sheet
            strict: Raise `DuplicateIdentifierError` on a repeated ID instead of
                logging a warning and keeping the first row
            verbose: Whether to print progress messages
        """
        self.store = store
        self.strict = strict
        self.verbose = verbose
        self.duplicates = []
        self._records = None
        self._combo_strings = None

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def reset(self):
        self.duplicates = []
        self._records = None
        self._combo_strings = None

    def get_all(self) -> Dict[str, dict]:
        """
        Student records keyed by ID, in roster order. Built once per instance.

        Raises:
            EmptyIdentifierError: if a row has a name but no ID. Nothing is
                returned in that case.
        """
        if self._records is None:
            self._records = self._read_records()
        return self._records

    def fresh_records(self) -> Dict[str, dict]:
        """New copies of the roster records, with every response field reset."""
        return {student_id: new_student_record(student_id, record['full_name'])
                for student_id, record in self.get_all().items()}

    def get_ids_sorted(self) -> List[str]:
        return sorted(self.get_all().keys())

    def get_id_name_combos(self) -> List[str]:
        """Combo strings for every student, sorted alphabetically."""
        if self._combo_strings is None:
            self._combo_strings = sorted(
                create_id_name_combo_string(record['id'], record['full_name'])
                for record in self.get_all().values())
        return self._combo_strings

    def get_random_ids(self, id_to_skip: str, num_ids: int,
                       rng: Optional[np.random.Generator] = None,
                       exclude: Optional[List[str]] = None) -> List[str]:
        """
        Random, unique student IDs other than `id_to_skip`.

        Args:
            id_to_skip: ID that must not be returned (the respondent)
            num_ids: Number of IDs to return; capped at the number available
            rng: Random generator, for reproducible test responses
            exclude: Further IDs that must not be returned
        """
        if num_ids <= 0:
            return []
        rng = rng if rng is not None else np.random.default_rng()
        skipped = {normalize_id(id_to_skip)} | {normalize_id(i) for i in (exclude or [])}
        candidates = [student_id for student_id in self.get_all() if student_id not in skipped]
        num_ids = min(num_ids, len(candidates))
        if num_ids == 0:
            return []
        chosen = rng.choice(len(candidates), size=num_ids, replace=False)
        return [candidates[int(i)] for i in chosen]

    def get_combo_for_id(self, student_id: str) -> str:
        record = self.get_all()[normalize_id(student_id)]
        return create_id_name_combo_string(record['id'], record['full_name'])

    # ========== READING ==========

    def _read_records(self) -> Dict[str, dict]:
        values = self.store.get_sheet_values(WorkbookStore.STUDENTS_SHEET, skip_header=True)
        records = {}
        self.duplicates = []
        if not values:
            self.log("  WARNING: The students sheet has no students")
            return records

        df = pd.DataFrame(values, dtype=object)
        for idx, row in df.iterrows():
            row_num = idx + 2  # header row, 1-based
            full_name = row.get(self.NAME_COLUMN)
            full_name = '' if pd.isna(full_name) else str(full_name).strip()
            student_id = normalize_id(row.get(self.ID_COLUMN))

            # Fully blank rows between students are skipped
            if student_id == '' and full_name == '':
                continue
            if student_id == '':
                raise EmptyIdentifierError(full_name, row_num)

            if student_id in records:
                error = DuplicateIdentifierError(student_id, row_num)
                if self.strict:
                    raise error
                self.log(f"  WARNING: {error}. Keeping the first occurrence.")
                self.duplicates.append(student_id)
                continue

            records[student_id] = new_student_record(student_id, full_name)

        self.log(f"Loaded {len(records)} students from the roster")
        return records

    # ========== IMPORT ==========

    def import_file(self, path: str) -> int:
        """
        Replace the rows of the "Students" sheet with the roster in a CSV or
        Excel file. The file must have the full name in its first column and
        the ID in its second; a header row is expected.

        Returns:
            Number of rows written
        """
        if path.endswith('.csv'):
            df = pd.read_csv(path, dtype=str)
        else:
            df = pd.read_excel(path, dtype=str)
        if df.shape[1] < 2:
            raise ValueError('The roster file needs a name column and an ID column')

        df = df.iloc[:, :2].copy()
        df.columns = self.HEADERS
        df = df.dropna(how='all')
        df['Full Name'] = df['Full Name'].fillna('').str.strip()
        df['ASUrite ID'] = df['ASUrite ID'].fillna('').str.strip()

        sheet_name = WorkbookStore.STUDENTS_SHEET
        self.store.get_or_create_sheet(sheet_name)
        self.store.clear_rows(sheet_name)
        self.store.set_range_values(sheet_name, 1, 1, [self.HEADERS])
        self.store.set_range_values(sheet_name, 2, 1, df.values.tolist())
        self.reset()
        self.log(f"Imported {len(df)} roster rows from {path}")
        return len(df)
