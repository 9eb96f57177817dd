"""
Creates a new survey workbook: the "Config" sheet with its named ranges, an
empty "Students" sheet, and the hidden form item registry sheet.
"""

from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font

from team_survey.config import ConfigStore
from team_survey.roster import Roster
from team_survey.workbook import WorkbookStore


def create_workbook(path: Optional[str] = None, proficiency_questions: Optional[List[str]] = None,
                    students: Optional[List[List[str]]] = None, verbose: bool = True) -> WorkbookStore:
    """
    Builds a survey workbook and saves it to `path` when one is given.

    Args:
        path: Where to save the workbook
        proficiency_questions: Initial proficiency questions. Defaults to
            `ConfigStore.DEFAULTS`.
        students: Initial roster rows as `[full name, id]`
        verbose: Whether to print progress messages

    Returns:
        A store for the new workbook
    """
    wb = Workbook()
    config_sheet = wb.active
    config_sheet.title = WorkbookStore.CONFIG_SHEET
    store = WorkbookStore(path=path, workbook=wb, verbose=verbose)

    defaults = dict(ConfigStore.DEFAULTS)
    if proficiency_questions is not None:
        defaults[ConfigStore.PROFICIENCY_QUESTIONS] = list(proficiency_questions)

    # One row per key, label in column A and value in column B. The
    # proficiency questions come last so the range can grow downwards.
    row = 1
    for key in ConfigStore.KEYS:
        value = defaults[key]
        store.set_cell(WorkbookStore.CONFIG_SHEET, row, 1, ConfigStore.LABELS[key])
        config_sheet.cell(row=row, column=1).font = Font(bold=True)
        if isinstance(value, list):
            entries = value or ['']
            store.set_range_values(WorkbookStore.CONFIG_SHEET, row, 2, [[entry] for entry in entries])
            store.set_named_range(key, WorkbookStore.CONFIG_SHEET, row, 2, num_rows=len(entries))
            row += len(entries)
        else:
            store.set_cell(WorkbookStore.CONFIG_SHEET, row, 2, value)
            store.set_named_range(key, WorkbookStore.CONFIG_SHEET, row, 2)
            row += 1
    config_sheet.column_dimensions['A'].width = 32
    config_sheet.column_dimensions['B'].width = 48

    store.create_sheet(WorkbookStore.STUDENTS_SHEET)
    store.set_range_values(WorkbookStore.STUDENTS_SHEET, 1, 1, [Roster.HEADERS])
    if students:
        store.set_range_values(WorkbookStore.STUDENTS_SHEET, 2, 1, [list(s) for s in students])

    store.create_sheet(WorkbookStore.FORM_ITEM_IDS_SHEET, hidden=True)
    store.save()
    return store
