"""
Error types raised by the team survey scripts.

Loading errors (config, roster, registry) abort the whole operation. Blank
answers in a response are never errors.
"""


class SurveyError(Exception):
    """Base class for every error an operator should see."""


class ConfigurationMissingError(SurveyError):
    """A required config key is absent, blank, or holds an invalid value."""

    def __init__(self, key: str, detail: str = ''):
        self.key = key
        message = f"Config value '{key}' is missing"
        if detail:
            message = f"Config value '{key}' is invalid: {detail}"
        super().__init__(message)


class FormNotConfiguredError(SurveyError):
    """No form ID is stored in the config."""

    def __init__(self):
        super().__init__('No form ID is specified in the config. Create a form first.')


class FormAlreadyConfiguredError(SurveyError):
    """A form ID is already stored in the config."""

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f'Form ID {form_id} already specified in config. '
                         'Please delete that form first before creating a form.')


class FormNotFoundError(SurveyError, KeyError):
    """The form host has no form with the given ID."""

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f'Form {form_id} does not exist')

    def __str__(self):
        return self.args[0]


class DuplicateIdentifierError(SurveyError):
    """Two roster rows share the same student ID."""

    def __init__(self, student_id: str, row_num: int):
        self.student_id = student_id
        self.row_num = row_num
        super().__init__(f'ID {student_id} has already been entered '
                         f'(row {row_num} of the students sheet)')


class EmptyIdentifierError(SurveyError):
    """A roster row has no student ID."""

    def __init__(self, full_name, row_num: int):
        self.full_name = full_name
        self.row_num = row_num
        super().__init__(f'ID for {full_name} was empty (row {row_num} of the students sheet)')


class UnregisteredItemError(SurveyError):
    """The registry has no physical item for a logical item name."""

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f'Form item with name {item_name} has not been stored')


class UnknownStudentError(SurveyError):
    """A response refers to an ID that is not on the roster."""

    def __init__(self, student_id: str, response_id: str = ''):
        self.student_id = student_id
        self.response_id = response_id
        super().__init__(self._describe(student_id, response_id))

    def _describe(self, student_id, response_id):
        if not response_id:
            return f'ID {student_id} is not on the roster'
        return f'ID {student_id} is not on the roster (response {response_id})'


class UnknownRespondentError(UnknownStudentError):
    """The identity answer of a response does not match any roster ID."""

    def _describe(self, student_id, response_id):
        return f'Respondent {student_id} of response {response_id} is not on the roster'


class UnknownTeammateError(UnknownStudentError):
    """A teammate choice in a response does not match any roster ID."""

    def _describe(self, student_id, response_id):
        return f'Teammate {student_id} chosen in response {response_id} is not on the roster'


class InvalidResponseError(SurveyError, ValueError):
    """An answer does not fit the form item it was given for."""
