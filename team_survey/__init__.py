"""
Team Formation Survey
=====================

Builds a team formation survey form from a course roster, reads the
responses back into per-student records, and compiles the results sheet used
to match students into teams.
"""

from team_survey.errors import (
    ConfigurationMissingError,
    DuplicateIdentifierError,
    EmptyIdentifierError,
    FormAlreadyConfiguredError,
    FormNotConfiguredError,
    FormNotFoundError,
    InvalidResponseError,
    SurveyError,
    UnknownRespondentError,
    UnknownTeammateError,
    UnregisteredItemError,
)
from team_survey.session import SurveySession

__version__ = '1.0.0'
