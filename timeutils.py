import math
import re

from errors import InvalidFormatError, OutOfRangeError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")


def time_to_minutes(value: str) -> int:
    """
    Converts a zero-padded "HH:mm" string to minutes since midnight.

    Args:
        value (str): Wall-clock time, e.g. "09:30".

    Returns:
        int: Minutes since midnight in [0, 1439].

    Raises:
        InvalidFormatError: If the string is not two zero-padded numeric
            fields or hour/minute are out of their range.
    """
    if not isinstance(value, str):
        raise InvalidFormatError(f"Time must be a string in HH:mm format, got {value!r}")

    match = _TIME_PATTERN.fullmatch(value)
    if not match:
        raise InvalidFormatError(f"Time must be in HH:mm format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidFormatError(f"Time {value!r} is not a valid time of day")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """
    Converts minutes since midnight back to a zero-padded "HH:mm" string.

    The caller is responsible for clamping; values outside [0, 1439]
    are rejected.
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise OutOfRangeError(f"Minutes must be an integer, got {minutes!r}")
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise OutOfRangeError(f"Minutes {minutes} outside [0, {MINUTES_PER_DAY - 1}]")

    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_between(start: str, end: str) -> float:
    """
    Hours between two time-of-day values as entered in the slot editor.

    An end earlier than the start is read as the next day. Equal values
    yield the one-hour default rather than zero.
    """
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)

    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY

    diff = end_minutes - start_minutes
    if diff == 0:
        diff = 60

    return diff / 60


def end_time(start: str, duration: float) -> str:
    """End time of a slot as shown in the editor, wrapping past midnight."""
    total = time_to_minutes(start) + int(round(duration * 60))
    return minutes_to_time(total % MINUTES_PER_DAY)


def format_duration(hours: float) -> str:
    h = math.floor(hours)
    m = int(round((hours - h) * 60))
    if m == 60:
        h, m = h + 1, 0
    if h == 0 and m == 0:
        return "0m"
    return f"{h}h {m}m" if m > 0 else f"{h}h"
