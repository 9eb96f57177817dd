"""
Logical form items.

Each logical item is one concept on the survey (for example "the preferred
teammates") and is built from one or more physical form items. The set is
closed: the builder creates exactly these, the registry stores exactly these,
and the extractor decodes exactly these.
"""

from typing import Any, Callable, Dict, List, Optional

from team_survey.date_util import get_weekday_strings, parse_utc_time_zone
from team_survey.roster import get_id_from_name_combo_string, normalize_id

ASURITE_QUESTION = 'asuriteQuestion'
TAIGA_EMAIL_QUESTION = 'taigaEmailQuestion'
GITHUB_USERNAME_QUESTION = 'githubUsernameQuestion'
TIME_ZONE_QUESTION = 'timeZoneQuestion'
AVAILABILITY_QUESTION = 'availabilityQuestion'
PROFICIENCY_QUESTIONS = 'proficiencyQuestions'
PREFERRED_STUDENTS = 'preferredStudents'
DISLIKED_STUDENTS = 'dislikedStudents'

# Length of each availability slot in hours
AVAILABILITY_SLOT_HOURS = 3


def decode_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text != '' else None


def decode_scale(raw: Any) -> Optional[int]:
    if raw is None or str(raw).strip() == '':
        return None
    return int(str(raw).strip())


def decode_teammate(raw: Any) -> Optional[str]:
    """`"aneuhold - Anton Neuhold"` -> `"aneuhold"`"""
    if raw is None or str(raw).strip() == '':
        return None
    return get_id_from_name_combo_string(raw)


def decode_availability(raw: Any, time_strings: List[str]) -> List[Dict[str, bool]]:
    """
    One `{weekday: available}` map per timeslot. Rows missing from the answer,
    or a missing answer altogether, count as not available.
    """
    weekdays = get_weekday_strings()
    rows = list(raw) if raw is not None else []
    availability = []
    for slot_index in range(len(time_strings)):
        checked = rows[slot_index] if slot_index < len(rows) and rows[slot_index] else []
        availability.append({day: day in checked for day in weekdays})
    return availability


def no_availability(time_strings: List[str]) -> List[Dict[str, bool]]:
    return decode_availability(None, time_strings)


class ResponseItemDescriptor:
    """
    How one logical item maps onto a student record.

    Attributes:
        name: Logical item name stored in the registry
        multiple: Whether the item is built from several physical items
        field: Student record key the decoded value goes into
        decode: Turns one raw answer into the value stored in the record
    """

    def __init__(self, name: str, multiple: bool, field: Optional[str],
                 decode: Callable[[Any], Any]):
        self.name = name
        self.multiple = multiple
        self.field = field
        self.decode = decode

    def __repr__(self):
        return f'ResponseItemDescriptor({self.name!r}, multiple={self.multiple})'


ITEMS = {
    ASURITE_QUESTION: ResponseItemDescriptor(ASURITE_QUESTION, False, 'id', normalize_id),
    TAIGA_EMAIL_QUESTION: ResponseItemDescriptor(TAIGA_EMAIL_QUESTION, False, 'contact_email', decode_text),
    GITHUB_USERNAME_QUESTION: ResponseItemDescriptor(GITHUB_USERNAME_QUESTION, False, 'github_username',
                                                     decode_text),
    TIME_ZONE_QUESTION: ResponseItemDescriptor(TIME_ZONE_QUESTION, False, 'utc_offset', parse_utc_time_zone),
    # Decoded against the generated timeslot labels by the extractor
    AVAILABILITY_QUESTION: ResponseItemDescriptor(AVAILABILITY_QUESTION, False, 'availability',
                                                  decode_availability),
    PROFICIENCY_QUESTIONS: ResponseItemDescriptor(PROFICIENCY_QUESTIONS, True, 'proficiencies', decode_scale),
    PREFERRED_STUDENTS: ResponseItemDescriptor(PREFERRED_STUDENTS, True, 'preferred_students', decode_teammate),
    DISLIKED_STUDENTS: ResponseItemDescriptor(DISLIKED_STUDENTS, True, 'disliked_students', decode_teammate),
}

SCALAR_ITEMS = [TAIGA_EMAIL_QUESTION, GITHUB_USERNAME_QUESTION, TIME_ZONE_QUESTION]
TEAMMATE_ITEMS = [PREFERRED_STUDENTS, DISLIKED_STUDENTS]
