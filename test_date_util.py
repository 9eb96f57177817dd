import numpy as np
import pytest

from team_survey import date_util


def test_three_hour_slots_cover_the_day():
    time_strings = date_util.generate_time_strings(3)
    assert len(time_strings) == 8
    assert time_strings[0] == '0:00 AM - 3:00 AM'
    assert time_strings[3] == '9:00 AM - 12:00 PM'
    assert time_strings[4] == '12:00 PM - 3:00 PM'
    assert time_strings[-1] == '9:00 PM - 12:00 PM'


def test_partial_trailing_slot_is_dropped():
    assert len(date_util.generate_time_strings(5)) == 4
    assert len(date_util.generate_time_strings(24)) == 1


@pytest.mark.parametrize('num_hours', [0, -3])
def test_non_positive_slot_length_raises(num_hours):
    with pytest.raises(ValueError):
        date_util.generate_time_strings(num_hours)


def test_am_pm_labels():
    assert date_util.get_am_pm_time_from_24_hour(0) == '0:00 AM'
    assert date_util.get_am_pm_time_from_24_hour(11) == '11:00 AM'
    assert date_util.get_am_pm_time_from_24_hour(12) == '12:00 PM'
    assert date_util.get_am_pm_time_from_24_hour(14) == '2:00 PM'


def test_weekdays_start_on_sunday():
    weekdays = date_util.get_weekday_strings()
    assert weekdays[0] == 'Sunday'
    assert len(weekdays) == 7


def test_utc_labels():
    labels = date_util.get_utc_time_zone_strings()
    assert labels[0] == 'UTC -11'
    assert labels[-1] == 'UTC +12'
    assert 'UTC +0' in labels
    assert len(labels) == 24


@pytest.mark.parametrize('label, expected', [
    ('UTC -7', -7), ('UTC +0', 0), ('UTC +12', 12), (' utc +5 ', 5), ('', None), (None, None),
])
def test_parse_utc_time_zone(label, expected):
    assert date_util.parse_utc_time_zone(label) == expected


@pytest.mark.parametrize('label', ['GMT +1', 'UTC +13', 'UTC x'])
def test_parse_utc_time_zone_rejects_bad_labels(label):
    with pytest.raises(ValueError):
        date_util.parse_utc_time_zone(label)


def test_random_time_zone_is_a_valid_label():
    rng = np.random.default_rng(0)
    labels = date_util.get_utc_time_zone_strings()
    for _ in range(10):
        assert date_util.get_random_utc_time_zone(rng) in labels
