"""
Date and time helpers used to label the availability grid and the time zone
question.
"""

from typing import List, Optional

import numpy as np

WEEKDAYS = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

UTC_OFFSET_MIN = -11
UTC_OFFSET_MAX = 12


def get_weekday_strings() -> List[str]:
    """Weekday names starting with Sunday."""
    return list(WEEKDAYS)


def get_am_pm_from_hour(hour: int) -> str:
    return 'PM' if hour >= 12 else 'AM'


def get_am_pm_time_from_24_hour(hour: int) -> str:
    """
    Time label for a 24 hour value. For example `14` gives `2:00 PM`.

    Midnight is labelled `0:00 AM` and the end of the day `12:00 PM`, the same
    labels the existing forms were generated with.
    """
    adjusted_hour = hour - 12 if hour > 12 else hour
    return f'{adjusted_hour}:00 {get_am_pm_from_hour(hour)}'


def generate_time_strings(num_hours: int) -> List[str]:
    """
    Time slot labels covering one day, starting at midnight. Each slot is
    `num_hours` long; a trailing partial slot is not generated.

    Args:
        num_hours: Length of each slot in hours

    Returns:
        Labels such as `3:00 AM - 6:00 AM`
    """
    if num_hours <= 0:
        raise ValueError(f'num_hours must be positive, got {num_hours}')

    time_strings = []
    current_hour = 0
    while current_hour + num_hours <= 24:
        time_strings.append(f'{get_am_pm_time_from_24_hour(current_hour)} - '
                            f'{get_am_pm_time_from_24_hour(current_hour + num_hours)}')
        current_hour += num_hours
    return time_strings


def get_utc_time_zone_strings() -> List[str]:
    """UTC offset labels from `UTC -11` to `UTC +12`."""
    return [f"UTC {'' if i < 0 else '+'}{i}" for i in range(UTC_OFFSET_MIN, UTC_OFFSET_MAX + 1)]


def parse_utc_time_zone(label) -> Optional[int]:
    """
    Offset in hours for a label made by `get_utc_time_zone_strings`.

    Returns None for a blank label.
    """
    if label is None:
        return None
    text = str(label).strip()
    if text == '':
        return None
    if not text.upper().startswith('UTC'):
        raise ValueError(f'Not a UTC time zone label: {label!r}')
    offset = int(text[3:].replace(' ', '') or 0)
    if not UTC_OFFSET_MIN <= offset <= UTC_OFFSET_MAX:
        raise ValueError(f'UTC offset out of range: {label!r}')
    return offset


def get_random_utc_time_zone(rng: Optional[np.random.Generator] = None) -> str:
    rng = rng if rng is not None else np.random.default_rng()
    time_zone_strings = get_utc_time_zone_strings()
    return time_zone_strings[int(rng.integers(len(time_zone_strings)))]
