from helper import validate_slot
from models import Weekday
from repositioning import latest_start, reposition, snap_to_grid

def make_slot(start_time="09:00", duration=1, day="Monday"):
    return validate_slot({
        "id": "1",
        "title": "Focus",
        "day": day,
        "startTime": start_time,
        "duration": duration,
        "color": "#16a34a",
    })

# =========================================================
# TEST: snap_to_grid / latest_start
# =========================================================
def test_snap_to_grid_rounds_half_up():
    assert snap_to_grid(7) == 0
    assert snap_to_grid(7.5) == 15
    assert snap_to_grid(22.4) == 15
    assert snap_to_grid(-7.5) == 0
    assert snap_to_grid(-8) == -15

def test_latest_start():
    assert latest_start(2) == 1320
    assert latest_start(24) == 0
    assert latest_start(1.5) == 1350

# =========================================================
# TEST: reposition
# =========================================================
def test_reposition_snaps_to_quarter_hour():
    moved = reposition(make_slot("09:07"), 10, Weekday.MONDAY)
    assert moved.start_time == "09:15"

def test_reposition_clamps_to_midnight():
    moved = reposition(make_slot("01:00"), -500, "Monday")
    assert moved.start_time == "00:00"

def test_reposition_clamps_to_end_of_day():
    moved = reposition(make_slot("20:00", duration=2), 400, "Monday")
    assert moved.start_time == "22:00"
    assert moved.end_time == "00:00"

def test_reposition_changes_day():
    moved = reposition(make_slot(), 0, "Thursday")
    assert moved.day == Weekday.THURSDAY
    assert moved.start_time == "09:00"

def test_reposition_same_day_is_valid():
    original = make_slot()
    moved = reposition(original, 0, "Monday")
    assert moved.to_record() == original.to_record()

def test_reposition_keeps_other_fields():
    original = make_slot()
    moved = reposition(original, 60, "Friday")
    assert moved.id == original.id
    assert moved.title == original.title
    assert moved.duration == original.duration
    assert moved.color == original.color

def test_reposition_result_is_valid():
    for delta in (-2000, -15, 0, 33, 700, 2000):
        moved = reposition(make_slot("12:00", duration=3), delta, "Sunday")
        assert validate_slot(moved.to_record()).to_record() == moved.to_record()

def test_reposition_infinite_delta_clamps():
    assert reposition(make_slot(), float("inf"), "Monday").start_time == "23:00"
    assert reposition(make_slot(), float("-inf"), "Monday").start_time == "00:00"

def test_reposition_nan_delta_keeps_start():
    moved = reposition(make_slot("09:07"), float("nan"), "Tuesday")
    assert moved.start_time == "09:00"
    assert moved.day == Weekday.TUESDAY
