"""
Form Item Registry
==================

Maps each logical item name (see `team_survey.items`) to the ordered list of
physical item IDs on the current form.

The mapping is kept in the hidden "_formItemIds" sheet, one row per logical
item: `[logicalItemName, id1;id2;...]`. Re-registering a name overwrites its
row in place, so rebuilding the form never leaves orphan rows behind.
"""

from datetime import datetime
from typing import Dict, List

from team_survey.errors import UnregisteredItemError
from team_survey.items import ITEMS
from team_survey.workbook import WorkbookStore

ID_DELIMITER = ';'


class SidecarTable:
    """
    Storage adapter for the registry sheet. Only this class knows about the
    `;`-joined encoding of ID lists.
    """

    def __init__(self, store: WorkbookStore, sheet_name: str = WorkbookStore.FORM_ITEM_IDS_SHEET):
        self.store = store
        self.sheet_name = sheet_name

    def _sheet(self):
        return self.store.get_or_create_sheet(self.sheet_name, hidden=True)

    @staticmethod
    def encode(ids: List[str]) -> str:
        return ID_DELIMITER.join(ids)

    @staticmethod
    def decode(value) -> List[str]:
        if value is None or str(value).strip() == '':
            return []
        return [part.strip() for part in str(value).split(ID_DELIMITER) if part.strip() != '']

    def read_all(self) -> Dict[str, dict]:
        """Every stored row as `{name: {'ids': [...], 'row_num': n}}`."""
        self._sheet()
        entries = {}
        for index, row in enumerate(self.store.get_sheet_values(self.sheet_name)):
            name = row[0] if row else None
            if name is None or str(name).strip() == '':
                continue
            value = row[1] if len(row) > 1 else None
            # First column is the name, second the IDs
            entries[str(name).strip()] = {'ids': self.decode(value), 'row_num': index + 1}
        return entries

    def write_row(self, row_num: int, name: str, ids: List[str]):
        self._sheet()
        values = [name, self.encode(ids)]
        # Cells right of the ID column are cleared
        extra_columns = max(self.store.get_last_column(self.sheet_name) - len(values), 0)
        self.store.set_range_values(self.sheet_name, row_num, 1, [values + [None] * extra_columns])

    def next_row(self) -> int:
        self._sheet()
        return self.store.get_last_row(self.sheet_name) + 1

    def clear(self):
        self._sheet()
        self.store.clear_rows(self.sheet_name)


class FormItemRegistry:
    """Logical item name -> ordered physical item IDs."""

    def __init__(self, table: SidecarTable, verbose: bool = True):
        self.table = table
        self.verbose = verbose
        self._entries = None

    def log(self, message: str):
        """Print a log message if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            print(f"[{timestamp}] {message}")

    def reset(self):
        self._entries = None

    def _get_entries(self) -> Dict[str, dict]:
        if self._entries is None:
            self._entries = self.table.read_all()
        return self._entries

    def register(self, item_name: str, item_ids: List[str]):
        """
        Stores the physical IDs of a logical item, replacing any IDs stored
        before. The row of an existing entry is reused.

        Raises:
            ValueError: for a name outside the known logical items, an empty or
                duplicated ID, or an ID containing the storage delimiter
        """
        if item_name not in ITEMS:
            raise ValueError(f'Unknown form item name: {item_name}')
        item_ids = [str(item_id) for item_id in item_ids]
        for item_id in item_ids:
            if item_id.strip() == '' or ID_DELIMITER in item_id:
                raise ValueError(f'Invalid form item ID for {item_name}: {item_id!r}')
        if len(set(item_ids)) != len(item_ids):
            raise ValueError(f'Duplicate form item IDs for {item_name}: {item_ids}')
        if not ITEMS[item_name].multiple and len(item_ids) != 1:
            raise ValueError(f'{item_name} takes exactly one form item ID, got {len(item_ids)}')

        entries = self._get_entries()
        if item_name in entries:
            row_num = entries[item_name]['row_num']
        else:
            row_num = self.table.next_row()
        self.table.write_row(row_num, item_name, item_ids)
        entries[item_name] = {'ids': list(item_ids), 'row_num': row_num}
        self.log(f"Registered {len(item_ids)} form item(s) for {item_name}")

    def lookup(self, item_name: str) -> List[str]:
        """
        Physical IDs of a logical item, in creation order.

        Raises:
            UnregisteredItemError: if the name was never registered
        """
        entries = self._get_entries()
        if item_name not in entries:
            raise UnregisteredItemError(item_name)
        return list(entries[item_name]['ids'])

    def lookup_single(self, item_name: str) -> str:
        item_ids = self.lookup(item_name)
        if len(item_ids) != 1:
            raise UnregisteredItemError(item_name)
        return item_ids[0]

    def is_registered(self, item_name: str) -> bool:
        return item_name in self._get_entries()

    def get_row_num(self, item_name: str) -> int:
        entries = self._get_entries()
        if item_name not in entries:
            raise UnregisteredItemError(item_name)
        return entries[item_name]['row_num']

    def clear(self):
        """Forget every registered item, on the sheet and in memory."""
        self.table.clear()
        self._entries = {}
        self.log("Cleared the form item registry")
