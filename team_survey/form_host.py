"""
Form Host
=========

The service that hosts the survey form and collects its responses.

`FormHost` is the interface the scripts program against. `LocalFormHost`
keeps every form as a JSON file (or only in memory when no directory is
given), which is enough to build forms, submit test responses, and read
responses back between separate invocations.

Item types and their answer formats:

    TEXT        free text, optionally checked against a regular expression
    LIST        one of the item's choices
    SCALE       a whole number from `lower` to `upper`, stored as a string
    GRID        checkbox grid: one entry per row, each a list of the checked
                columns or None when nothing is checked in that row
    PAGE_BREAK  starts a new section; takes no answer
"""

import json
import os
import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from team_survey.errors import FormNotFoundError, InvalidResponseError

TEXT = 'TEXT'
LIST = 'LIST'
SCALE = 'SCALE'
GRID = 'GRID'
PAGE_BREAK = 'PAGE_BREAK'

ITEM_TYPES = (TEXT, LIST, SCALE, GRID, PAGE_BREAK)


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


class FormResponse:
    """One submitted (or in-progress) response to a form."""

    def __init__(self, form: 'Form', data: Optional[Dict[str, Any]] = None):
        self.form = form
        self.data = data if data is not None else {'id': None, 'timestamp': None, 'answers': {}}

    @property
    def id(self) -> Optional[str]:
        return self.data['id']

    @property
    def timestamp(self) -> Optional[str]:
        return self.data['timestamp']

    def get_response_for_item(self, item_id: str) -> Any:
        """The answer given for an item, or None when it was left blank."""
        return self.data['answers'].get(str(item_id))

    def get_answered_item_ids(self) -> List[str]:
        return list(self.data['answers'].keys())

    def with_item_response(self, item_id: str, value: Any) -> 'FormResponse':
        """
        Sets the answer for an item. A None value clears it.

        Raises:
            InvalidResponseError: if the answer does not fit the item
        """
        item_id = str(item_id)
        if value is None:
            self.data['answers'].pop(item_id, None)
            return self
        self.data['answers'][item_id] = self.form.validate_answer(item_id, value)
        return self

    def submit(self) -> str:
        if self.id is not None:
            raise InvalidResponseError(f'Response {self.id} has already been submitted')
        self.data['id'] = _new_id()
        self.data['timestamp'] = datetime.now().isoformat()
        self.form.data['responses'].append(self.data)
        self.form.save()
        return self.id


class Form:
    """A form and its responses."""

    def __init__(self, host: 'FormHost', data: Dict[str, Any]):
        self.host = host
        self.data = data

    @property
    def id(self) -> str:
        return self.data['id']

    @property
    def title(self) -> str:
        return self.data['title']

    @property
    def description(self) -> str:
        return self.data.get('description', '')

    def save(self):
        self.host.save_form(self)

    def set_title(self, title: str):
        self.data['title'] = title
        self.save()

    def set_description(self, description: str):
        self.data['description'] = description
        self.save()

    # ========== ITEMS ==========

    def get_items(self, item_type: Optional[str] = None) -> List[Dict[str, Any]]:
        items = self.data['items']
        if item_type is not None:
            items = [item for item in items if item['type'] == item_type]
        return [dict(item) for item in items]

    def get_item(self, item_id: str) -> Dict[str, Any]:
        for item in self.data['items']:
            if item['id'] == str(item_id):
                return item
        raise KeyError(f'Form {self.id} has no item {item_id}')

    def has_item(self, item_id: str) -> bool:
        return any(item['id'] == str(item_id) for item in self.data['items'])

    def _add_item(self, item_type: str, title: str, **fields) -> str:
        item = {'id': _new_id(), 'type': item_type, 'title': title,
                'help_text': fields.pop('help_text', ''),
                'required': fields.pop('required', False)}
        item.update(fields)
        self.data['items'].append(item)
        self.save()
        return item['id']

    def add_text_item(self, title: str, pattern: Optional[str] = None,
                      validation_help: str = '', **fields) -> str:
        """Free text question. `pattern` must match the whole answer."""
        if pattern is not None:
            re.compile(pattern)
        return self._add_item(TEXT, title, pattern=pattern, validation_help=validation_help, **fields)

    def add_list_item(self, title: str, choices: List[str], **fields) -> str:
        """Single choice from a drop-down list. With no choices it accepts no answer."""
        return self._add_item(LIST, title, choices=list(choices), **fields)

    def add_scale_item(self, title: str, lower: int = 1, upper: int = 5,
                       lower_label: str = '', upper_label: str = '', **fields) -> str:
        if lower >= upper:
            raise ValueError(f'Scale bounds must increase, got {lower} to {upper}')
        return self._add_item(SCALE, title, lower=lower, upper=upper,
                              lower_label=lower_label, upper_label=upper_label, **fields)

    def add_grid_item(self, title: str, rows: List[str], columns: List[str], **fields) -> str:
        """Checkbox grid: any number of columns may be checked in each row."""
        if not rows or not columns:
            raise ValueError('A grid item needs rows and columns')
        return self._add_item(GRID, title, rows=list(rows), columns=list(columns), **fields)

    def add_page_break_item(self, title: str, **fields) -> str:
        return self._add_item(PAGE_BREAK, title, **fields)

    def delete_item(self, item_id: str):
        item = self.get_item(item_id)
        self.data['items'].remove(item)
        self.save()

    def delete_all_items(self) -> int:
        count = len(self.data['items'])
        self.data['items'] = []
        self.save()
        return count

    # ========== RESPONSES ==========

    def get_responses(self) -> List[FormResponse]:
        return [FormResponse(self, data) for data in self.data['responses']]

    def create_response(self) -> FormResponse:
        return FormResponse(self)

    def delete_all_responses(self) -> int:
        count = len(self.data['responses'])
        self.data['responses'] = []
        self.save()
        return count

    def validate_answer(self, item_id: str, value: Any) -> Any:
        """
        Checks an answer against its item and returns it in stored form.

        Raises:
            InvalidResponseError: if the answer does not fit the item
        """
        try:
            item = self.get_item(item_id)
        except KeyError as e:
            raise InvalidResponseError(str(e))
        item_type = item['type']

        if item_type == TEXT:
            text = str(value)
            pattern = item.get('pattern')
            if pattern and re.fullmatch(pattern, text) is None:
                raise InvalidResponseError(
                    item.get('validation_help') or f"'{text}' is not a valid answer to '{item['title']}'")
            return text

        if item_type == LIST:
            if value not in item['choices']:
                raise InvalidResponseError(f"'{value}' is not a choice of '{item['title']}'")
            return value

        if item_type == SCALE:
            try:
                number = int(str(value))
            except ValueError:
                raise InvalidResponseError(f"'{value}' is not a number for '{item['title']}'")
            if not item['lower'] <= number <= item['upper']:
                raise InvalidResponseError(
                    f"{number} is outside {item['lower']}-{item['upper']} for '{item['title']}'")
            return str(number)

        if item_type == GRID:
            if len(value) != len(item['rows']):
                raise InvalidResponseError(
                    f"'{item['title']}' has {len(item['rows'])} rows, got {len(value)}")
            rows = []
            for row in value:
                if row is None or len(row) == 0:
                    rows.append(None)
                    continue
                unknown = [column for column in row if column not in item['columns']]
                if unknown:
                    raise InvalidResponseError(f"{unknown} are not columns of '{item['title']}'")
                rows.append(list(row))
            return rows

        raise InvalidResponseError(f"'{item['title']}' does not take an answer")


class FormHost(ABC):
    """Creates, opens, stores, and deletes forms."""

    @abstractmethod
    def create_form(self, title: str) -> Form:
        pass

    @abstractmethod
    def open_form(self, form_id: str) -> Form:
        pass

    @abstractmethod
    def delete_form(self, form_id: str):
        pass

    @abstractmethod
    def save_form(self, form: Form):
        pass


class LocalFormHost(FormHost):
    """Forms stored as `<form id>.json` files in a directory, or in memory."""

    def __init__(self, forms_dir: Optional[str] = None):
        self.forms_dir = forms_dir
        self._memory = {}
        if forms_dir is not None:
            os.makedirs(forms_dir, exist_ok=True)

    def _path(self, form_id: str) -> str:
        return os.path.join(self.forms_dir, f'{form_id}.json')

    def create_form(self, title: str) -> Form:
        form = Form(self, {'id': _new_id(), 'title': title, 'description': '',
                           'created': datetime.now().isoformat(),
                           'items': [], 'responses': []})
        form.save()
        return form

    def open_form(self, form_id: str) -> Form:
        if self.forms_dir is None:
            if form_id not in self._memory:
                raise FormNotFoundError(form_id)
            return Form(self, self._memory[form_id])

        path = self._path(form_id)
        if not os.path.exists(path):
            raise FormNotFoundError(form_id)
        with open(path, 'r') as f:
            return Form(self, json.load(f))

    def delete_form(self, form_id: str):
        if self.forms_dir is None:
            self._memory.pop(form_id, None)
            return
        path = self._path(form_id)
        if os.path.exists(path):
            os.remove(path)

    def save_form(self, form: Form):
        if self.forms_dir is None:
            self._memory[form.id] = form.data
            return
        with open(self._path(form.id), 'w') as f:
            json.dump(form.data, f, indent=2)
