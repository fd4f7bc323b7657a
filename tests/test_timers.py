import pytest

from prepline.parsing.timers import calculate_total_time, extract_step_timing, timing_minutes


@pytest.mark.parametrize("text,expected", [
    ("Simmer for 3-5 minutes.", "3 minutes"),
    ("Bake 1 hour", "1 hour"),
    ("Bake 2 to 3 hours", "2 hours"),
    ("Rest 30 seconds", "30 seconds"),
    ("Cook 10 mins", "10 minutes"),
    ("Stir well", None),
    ("", None),
])
def test_extract_step_timing(text, expected):
    assert extract_step_timing(text) == expected


@pytest.mark.parametrize("timing,minutes", [
    ("1 hour", 60),
    ("1.5 hours", 90),
    ("3 minutes", 3),
    ("30 seconds", 1),
    (None, 0),
])
def test_timing_minutes(timing, minutes):
    assert timing_minutes(timing) == minutes


def test_calculate_total_time():
    assert calculate_total_time(["3 minutes", None, "1 hour"]) == "63 minutes"
    assert calculate_total_time([None, None]) is None
    assert calculate_total_time([]) is None
