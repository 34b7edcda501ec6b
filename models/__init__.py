from .ScheduleDB import Base, ScheduleDB
from .ScheduleSummary import ColorTotal, ScheduleSummary
from .Slot import (
    COLOR_PALETTE,
    DEFAULT_COLOR,
    DEFAULT_DURATION,
    DEFAULT_START_TIME,
    WEEKDAY_NAMES,
    WEEKDAYS,
    RecurringRequest,
    Slot,
    SlotCreate,
    SlotDraft,
    SlotMove,
    SlotUpdate,
    Weekday,
)
