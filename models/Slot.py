from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

import timeutils
from timeutils import MINUTES_PER_DAY, time_to_minutes


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# Canonical week order, Monday first (matches date.weekday()).
WEEKDAYS = tuple(Weekday)
WEEKDAY_NAMES = tuple(day.value for day in WEEKDAYS)

DEFAULT_COLOR = "#7c3aed"
DEFAULT_DURATION = 1.0
DEFAULT_START_TIME = "09:00"
COLOR_PALETTE = ("#7c3aed", "#2563eb", "#db2777", "#16a34a", "#ea580c", "#6366f1")


def _check_start_time(value: str) -> str:
    time_to_minutes(value)
    return value


def _check_fits_in_day(duration: float, info: ValidationInfo) -> float:
    start = info.data.get("start_time")
    if start is None:
        return duration
    # float hours, allow rounding noise
    if time_to_minutes(start) + duration * 60 > MINUTES_PER_DAY + 1e-9:
        raise ValueError("slot must not run past the end of its day")
    return duration


class Slot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, frozen=True)
    title: str = ""
    day: Weekday
    start_time: str = Field(alias="startTime")
    duration: float = Field(gt=0)
    color: str = DEFAULT_COLOR
    description: Optional[str] = ""

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return _check_start_time(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v: float, info: ValidationInfo) -> float:
        return _check_fits_in_day(v, info)

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, v):
        return v or DEFAULT_COLOR

    @property
    def end_time(self) -> str:
        return timeutils.end_time(self.start_time, self.duration)

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    def to_record(self) -> dict:
        """Plain JSON record in the stored camelCase shape."""
        return self.model_dump(mode="json", by_alias=True)


class SlotDraft(BaseModel):
    """Slot fields shared by every instance of a recurring request."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    start_time: str = Field(DEFAULT_START_TIME, alias="startTime")
    duration: float = Field(DEFAULT_DURATION, gt=0)
    color: str = DEFAULT_COLOR
    description: Optional[str] = ""

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return _check_start_time(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v: float, info: ValidationInfo) -> float:
        return _check_fits_in_day(v, info)

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, v):
        return v or DEFAULT_COLOR


class SlotCreate(SlotDraft):
    day: Optional[Weekday] = None
    selected_days: list[Weekday] = Field(default_factory=list, alias="selectedDays")


class SlotUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    title: Optional[str] = None
    day: Optional[Weekday] = None
    start_time: Optional[str] = Field(None, alias="startTime")
    duration: Optional[float] = None
    color: Optional[str] = None
    description: Optional[str] = None


class SlotMove(BaseModel):
    delta: float = Field(allow_inf_nan=False)
    day: Weekday


class RecurringRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    draft: SlotDraft
    days: list[Weekday] = Field(default_factory=list)
