"""
Workbook Store
==============

Document store for the team survey: an `.xlsx` workbook opened with openpyxl.
Named ranges are workbook defined names, and rows and columns are 1-based the
way a spreadsheet addresses them.

The store is opened once per operation and saved at the end of it.
"""

import os
import warnings
from datetime import datetime
from typing import Any, List, Optional, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.utils.cell import absolute_coordinate, get_column_letter, quote_sheetname, range_boundaries
from openpyxl.workbook.defined_name import DefinedName

warnings.filterwarnings('ignore', module='openpyxl')


class WorkbookStore:
    """Read and write sheets and named ranges of one workbook."""

    CONFIG_SHEET = 'Config'
    STUDENTS_SHEET = 'Students'
    FORM_ITEM_IDS_SHEET = '_formItemIds'

    def __init__(self, path: Optional[str] = None, workbook: Optional[Workbook] = None,
                 verbose: bool = True):
        """
        Open a workbook.

        Args:
            path: Path of the .xlsx file. When `workbook` is not given the file
                must exist.
            workbook: An already loaded workbook (for example an in-memory one)
            verbose: Whether to print progress messages
        """
        self.path = path
        self.verbose = verbose
        if workbook is not None:
            self.wb = workbook
        elif path is not None:
            if not os.path.exists(path):
                raise FileNotFoundError(f'Workbook not found: {path}')
            self.wb = load_workbook(path)
        else:
            raise ValueError('Either a path or a workbook is required')

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def save(self):
        """Write the workbook back to its file. In-memory stores are left as they are."""
        if self.path is None:
            return
        self.wb.save(self.path)
        self.log(f"Workbook saved to {self.path}")

    # ========== SHEETS ==========

    def get_sheet(self, name: str):
        if name not in self.wb.sheetnames:
            raise KeyError(f"Sheet '{name}' does not exist")
        return self.wb[name]

    def has_sheet(self, name: str) -> bool:
        return name in self.wb.sheetnames

    def get_or_create_sheet(self, name: str, hidden: bool = False):
        if self.has_sheet(name):
            return self.wb[name]
        return self.create_sheet(name, hidden=hidden)

    def create_sheet(self, name: str, hidden: bool = False):
        if self.has_sheet(name):
            raise ValueError(f"Sheet '{name}' already exists")
        sheet = self.wb.create_sheet(title=name)
        if hidden:
            sheet.sheet_state = 'hidden'
        self.log(f"Sheet '{name}' created")
        return sheet

    def delete_sheet(self, name: str):
        self.wb.remove(self.get_sheet(name))
        self.log(f"Sheet '{name}' deleted")

    def rename_sheet(self, name: str, new_name: str):
        if self.has_sheet(new_name):
            raise ValueError(f"Sheet '{new_name}' already exists")
        self.get_sheet(name).title = new_name

    def get_last_row(self, name: str) -> int:
        """Index of the last row holding a value, 0 for an empty sheet."""
        sheet = self.get_sheet(name)
        for row_num in range(sheet.max_row, 0, -1):
            if any(cell.value not in (None, '') for cell in sheet[row_num]):
                return row_num
        return 0

    def get_last_column(self, name: str) -> int:
        sheet = self.get_sheet(name)
        last_column = 0
        for row in sheet.iter_rows():
            for cell in row:
                if cell.value not in (None, ''):
                    last_column = max(last_column, cell.column)
        return last_column

    def get_sheet_values(self, name: str, skip_header: bool = False) -> List[List[Any]]:
        """
        Values of every used row of a sheet.

        Args:
            name: Sheet name
            skip_header: Leave out the first row (the column titles)
        """
        last_row = self.get_last_row(name)
        last_column = self.get_last_column(name)
        first_row = 2 if skip_header else 1
        if last_row < first_row or last_column == 0:
            return []
        return self.get_range_values(name, first_row, 1, last_row - first_row + 1, last_column)

    def get_range_values(self, name: str, row: int, column: int,
                         num_rows: int, num_columns: int) -> List[List[Any]]:
        sheet = self.get_sheet(name)
        return [list(values) for values in sheet.iter_rows(
            min_row=row, max_row=row + num_rows - 1,
            min_col=column, max_col=column + num_columns - 1,
            values_only=True)]

    def set_range_values(self, name: str, row: int, column: int, values: List[List[Any]]):
        sheet = self.get_sheet(name)
        for row_offset, row_values in enumerate(values):
            for column_offset, value in enumerate(row_values):
                sheet.cell(row=row + row_offset, column=column + column_offset, value=value)

    def get_cell(self, name: str, row: int, column: int) -> Any:
        return self.get_sheet(name).cell(row=row, column=column).value

    def set_cell(self, name: str, row: int, column: int, value: Any):
        self.get_sheet(name).cell(row=row, column=column, value=value)

    def append_row(self, name: str, values: List[Any]) -> int:
        """Write `values` below the last used row and return the new row number."""
        row_num = self.get_last_row(name) + 1
        self.set_range_values(name, row_num, 1, [values])
        return row_num

    def clear_rows(self, name: str, first_row: int = 1):
        sheet = self.get_sheet(name)
        if sheet.max_row >= first_row:
            sheet.delete_rows(first_row, sheet.max_row - first_row + 1)

    # ========== NAMED RANGES ==========

    def has_named_range(self, range_name: str) -> bool:
        return range_name in self.wb.defined_names

    def get_named_range(self, range_name: str) -> Tuple[str, int, int, int, int]:
        """
        Location of a named range.

        Returns:
            (sheet name, min column, min row, max column, max row)
        """
        if range_name not in self.wb.defined_names:
            raise KeyError(f"Named range '{range_name}' does not exist")
        destinations = list(self.wb.defined_names[range_name].destinations)
        if len(destinations) != 1:
            raise ValueError(f"Named range '{range_name}' must refer to exactly one range")
        sheet_name, coordinate = destinations[0]
        min_col, min_row, max_col, max_row = range_boundaries(coordinate.replace('$', ''))
        return sheet_name, min_col, min_row, max_col, max_row

    def set_named_range(self, range_name: str, sheet_name: str, row: int, column: int,
                        num_rows: int = 1, num_columns: int = 1):
        """Create or move a named range."""
        reference = f'{get_column_letter(column)}{row}'
        if num_rows > 1 or num_columns > 1:
            reference += f':{get_column_letter(column + num_columns - 1)}{row + num_rows - 1}'
        attr_text = f'{quote_sheetname(sheet_name)}!{absolute_coordinate(reference)}'
        if range_name in self.wb.defined_names:
            del self.wb.defined_names[range_name]
        self.wb.defined_names.add(DefinedName(range_name, attr_text=attr_text))

    def get_named_range_values(self, range_name: str) -> List[List[Any]]:
        sheet_name, min_col, min_row, max_col, max_row = self.get_named_range(range_name)
        return self.get_range_values(sheet_name, min_row, min_col,
                                     max_row - min_row + 1, max_col - min_col + 1)

    def get_named_value(self, range_name: str) -> Any:
        """Value of the top-left cell of a named range."""
        sheet_name, min_col, min_row, _, _ = self.get_named_range(range_name)
        return self.get_cell(sheet_name, min_row, min_col)

    def set_named_value(self, range_name: str, value: Any):
        sheet_name, min_col, min_row, _, _ = self.get_named_range(range_name)
        self.set_cell(sheet_name, min_row, min_col, value)

    def add_row_to_named_range(self, range_name: str):
        """
        Grow a named range by one row. The rows below the range on its sheet are
        shifted down so nothing underneath is overwritten.
        """
        sheet_name, min_col, min_row, max_col, max_row = self.get_named_range(range_name)
        self.get_sheet(sheet_name).insert_rows(max_row + 1)
        self._shift_named_ranges_below(sheet_name, max_row, 1, skip=range_name)
        self.set_named_range(range_name, sheet_name, min_row, min_col,
                             num_rows=max_row - min_row + 2, num_columns=max_col - min_col + 1)
        self.log(f"Added a row to '{range_name}'")

    def remove_row_from_named_range(self, range_name: str):
        """Shrink a named range by its last row. A range always keeps one row."""
        sheet_name, min_col, min_row, max_col, max_row = self.get_named_range(range_name)
        if max_row == min_row:
            raise ValueError(f"Named range '{range_name}' has only one row left")
        self.get_sheet(sheet_name).delete_rows(max_row)
        self._shift_named_ranges_below(sheet_name, max_row, -1, skip=range_name)
        self.set_named_range(range_name, sheet_name, min_row, min_col,
                             num_rows=max_row - min_row, num_columns=max_col - min_col + 1)
        self.log(f"Removed a row from '{range_name}'")

    def _shift_named_ranges_below(self, sheet_name: str, after_row: int, delta: int, skip: str):
        for other_name in list(self.wb.defined_names.keys()):
            if other_name == skip:
                continue
            other_sheet, min_col, min_row, max_col, max_row = self.get_named_range(other_name)
            if other_sheet == sheet_name and min_row > after_row:
                self.set_named_range(other_name, sheet_name, min_row + delta, min_col,
                                     num_rows=max_row - min_row + 1, num_columns=max_col - min_col + 1)
