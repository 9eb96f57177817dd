"""
Results Compiler
================

Flattens the student records into the results table: the fixed student
information columns, one column per proficiency question, then one column
per preferred and per disliked teammate slot.

A column whose position is past what a student answered (for example a
second disliked teammate that was left blank) stays empty.
"""

from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd
from openpyxl.formatting.rule import ColorScaleRule
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from team_survey.config import ConfigStore
from team_survey.workbook import WorkbookStore

# Formatting hints
GRADIENT = 'gradient'
GRADIENT_MIN_COLOR = 'FF1515'
GRADIENT_MAX_COLOR = '3ECD35'

# Rows the gradient is applied to, below the header
GRADIENT_ROWS = 200


class ResultsCompiler:
    """Builds the results table from the config and the student records."""

    STATIC_COLUMNS = [
        {'title': 'ASUrite ID', 'key': 'id', 'index': None, 'format': None},
        {'title': 'Full Name', 'key': 'full_name', 'index': None, 'format': None},
        {'title': 'Github Username', 'key': 'github_username', 'index': None, 'format': None},
        {'title': 'Taiga Email', 'key': 'contact_email', 'index': None, 'format': None},
        {'title': 'Timezone', 'key': 'utc_offset', 'index': None, 'format': None},
    ]

    def __init__(self, config: ConfigStore, verbose: bool = True):
        self.config = config
        self.verbose = verbose
        self._columns = None

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def get_columns(self) -> List[dict]:
        """
        The column schema. Each column names the student record key it reads
        and, for list fields, the position in that list.
        """
        if self._columns is not None:
            return self._columns

        config_obj = self.config.get_obj()
        columns = [dict(column) for column in self.STATIC_COLUMNS]
        for i, question in enumerate(config_obj[ConfigStore.PROFICIENCY_QUESTIONS]):
            columns.append({'title': question, 'key': 'proficiencies', 'index': i, 'format': GRADIENT})
        for i in range(config_obj[ConfigStore.NUM_PREFERRED_STUDENTS]):
            columns.append({'title': f'Preferred Student {i + 1}', 'key': 'preferred_students',
                            'index': i, 'format': None})
        for i in range(config_obj[ConfigStore.NUM_DISLIKED_STUDENTS]):
            columns.append({'title': f'Disliked Student {i + 1}', 'key': 'disliked_students',
                            'index': i, 'format': None})
        self._columns = columns
        return self._columns

    def get_headers(self) -> List[str]:
        return [column['title'] for column in self.get_columns()]

    @staticmethod
    def get_cell_value(record: dict, column: dict):
        value = record.get(column['key'])
        if column['index'] is None:
            return value if value != '' else None
        if value is None or column['index'] >= len(value):
            return None
        return value[column['index']]

    def compile(self, students: Dict[str, dict]) -> pd.DataFrame:
        """One row per student record, in the order given."""
        columns = self.get_columns()
        rows = [[self.get_cell_value(record, column) for column in columns]
                for record in students.values()]
        return pd.DataFrame(rows, columns=self.get_headers(), dtype=object)

    # ========== OUTPUT ==========

    @staticmethod
    def get_results_sheet_name(store: WorkbookStore, date: Optional[datetime] = None) -> str:
        date = date or datetime.now()
        name = f"Results - {date.strftime('%Y-%m-%d %H.%M')}"
        candidate = name
        suffix = 2
        while store.has_sheet(candidate):
            candidate = f'{name} ({suffix})'
            suffix += 1
        return candidate

    def write_to_workbook(self, store: WorkbookStore, table: pd.DataFrame,
                          sheet_name: Optional[str] = None) -> str:
        """
        Writes the table into a new sheet of the workbook.

        Returns:
            Name of the new sheet
        """
        sheet_name = sheet_name or self.get_results_sheet_name(store)
        sheet = store.create_sheet(sheet_name)

        headers = list(table.columns)
        store.set_range_values(sheet_name, 1, 1, [headers])
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        values = [[None if pd.isna(value) else value for value in row]
                  for row in table.itertuples(index=False, name=None)]
        store.set_range_values(sheet_name, 2, 1, values)

        for column_num, column in enumerate(self.get_columns(), start=1):
            if column['format'] == GRADIENT:
                self.apply_gradient_conditional_formatting(sheet, column_num)
        sheet.freeze_panes = 'A2'

        self.log(f"Results for {len(table)} students written to '{sheet_name}'")
        return sheet_name

    @staticmethod
    def apply_gradient_conditional_formatting(sheet, column_num: int):
        """Colors a proficiency column from red at 1 to green at 5."""
        letter = get_column_letter(column_num)
        cell_range = f'{letter}2:{letter}{GRADIENT_ROWS + 1}'
        rule = ColorScaleRule(start_type='num', start_value=1, start_color=GRADIENT_MIN_COLOR,
                              end_type='num', end_value=5, end_color=GRADIENT_MAX_COLOR)
        sheet.conditional_formatting.add(cell_range, rule)

    def export(self, table: pd.DataFrame, output, file_format: Optional[str] = None):
        """
        Writes the table to a standalone .xlsx or .csv file.

        Args:
            table: Table from `compile`
            output: File path, or a binary buffer such as `io.BytesIO`
            file_format: 'xlsx' or 'csv'. Taken from the file extension when
                not given; required for buffers.
        """
        if file_format is None:
            if not isinstance(output, str):
                raise ValueError("An export to a buffer needs file_format 'xlsx' or 'csv'")
            file_format = 'csv' if output.endswith('.csv') else 'xlsx'
        if file_format not in ('xlsx', 'csv'):
            raise ValueError(f"Unknown export format '{file_format}'")

        target = output if isinstance(output, str) else 'buffer'
        self.log(f"Exporting results to {target}...")
        if file_format == 'csv':
            if isinstance(output, str):
                table.to_csv(output, index=False)
            else:
                output.write(table.to_csv(index=False).encode())
        else:
            with pd.ExcelWriter(output, engine='openpyxl') as writer:
                table.to_excel(writer, sheet_name='Results', index=False)
                sheet = writer.sheets['Results']
                for column_num, column in enumerate(self.get_columns(), start=1):
                    if column['format'] == GRADIENT:
                        self.apply_gradient_conditional_formatting(sheet, column_num)
        self.log(f"Results exported to {target}")
