import math
from typing import Union

from models import Slot, Weekday
from timeutils import MINUTES_PER_DAY, minutes_to_time, time_to_minutes

# Grid scale: one pixel of vertical drag is one minute.
PIXELS_PER_MINUTE = 1
SNAP_MINUTES = 15


def snap_to_grid(minutes: float, step: int = SNAP_MINUTES) -> int:
    """Rounds to the nearest step boundary, halves rounding up."""
    return int(math.floor(minutes / step + 0.5)) * step


def latest_start(duration: float) -> int:
    """Latest start minute that still keeps a slot of this duration inside its day."""
    return max(0, int(math.floor(MINUTES_PER_DAY - duration * 60)))


def reposition(slot: Slot, delta: float, day: Union[Weekday, str]) -> Slot:
    """
    Computes where a dragged slot lands.

    The pointer delta is converted to minutes, snapped to the quarter-hour
    grid and clamped so the slot starts no earlier than midnight and ends
    no later than the end of the day. The drop target always becomes the
    new day, even when it equals the current one.

    Args:
        slot (Slot): The slot being dragged.
        delta (float): Vertical pointer movement in pixels; NaN counts as no movement.
        day (Weekday): The day column the slot was dropped on.

    Returns:
        Slot: A copy of the slot with the new day and start time.
    """
    if math.isnan(delta):
        delta = 0
    moved = time_to_minutes(slot.start_time) + delta / PIXELS_PER_MINUTE
    # snap input stays finite; the clamp below is tighter than this bound
    moved = max(min(moved, 2 * MINUTES_PER_DAY), -MINUTES_PER_DAY)
    snapped = snap_to_grid(moved)
    clamped = min(max(snapped, 0), latest_start(slot.duration))

    return slot.model_copy(update={"day": Weekday(day), "start_time": minutes_to_time(clamped)})
