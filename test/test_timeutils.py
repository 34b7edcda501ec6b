import pytest

from errors import InvalidFormatError, OutOfRangeError
from timeutils import duration_between, end_time, format_duration, minutes_to_time, time_to_minutes

# =========================================================
# TEST: time_to_minutes / minutes_to_time
# =========================================================
def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:30") == 570
    assert time_to_minutes("23:59") == 1439

@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "1200", "ab:cd", "", "09:00:00", "09:00\n", "０９:００", "٠٩:٠٠", None])
def test_time_to_minutes_invalid(value):
    with pytest.raises(InvalidFormatError):
        time_to_minutes(value)

def test_minutes_to_time_pads():
    assert minutes_to_time(0) == "00:00"
    assert minutes_to_time(545) == "09:05"
    assert minutes_to_time(1439) == "23:59"

@pytest.mark.parametrize("value", [-1, 1440, 5000, 9.5])
def test_minutes_to_time_out_of_range(value):
    with pytest.raises(OutOfRangeError):
        minutes_to_time(value)

def test_round_trip_every_minute():
    for m in range(0, 1440):
        t = minutes_to_time(m)
        assert minutes_to_time(time_to_minutes(t)) == t

# =========================================================
# TEST: duration_between
# =========================================================
def test_duration_between_same_day():
    assert duration_between("09:00", "10:00") == 1.0
    assert duration_between("09:00", "10:30") == 1.5

def test_duration_between_overnight():
    assert duration_between("23:00", "01:00") == 2.0

def test_duration_between_equal_defaults_to_one_hour():
    assert duration_between("09:00", "09:00") == 1.0

def test_duration_between_invalid():
    with pytest.raises(InvalidFormatError):
        duration_between("9am", "10:00")

# =========================================================
# TEST: end_time / format_duration
# =========================================================
def test_end_time():
    assert end_time("09:00", 1.5) == "10:30"
    assert end_time("23:00", 2) == "01:00"

def test_format_duration():
    assert format_duration(0) == "0m"
    assert format_duration(1) == "1h"
    assert format_duration(1.5) == "1h 30m"
    assert format_duration(0.25) == "0h 15m"
