from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    INVALID_FORMAT = "INVALID_FORMAT"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    VALIDATION = "VALIDATION"
    EMPTY_SELECTION = "EMPTY_SELECTION"
    IMPORT = "IMPORT"
    PERSISTENCE = "PERSISTENCE"


class SchedulerError(ValueError):
    """
    Base class for all recoverable scheduling errors.

    Derives from ValueError so pydantic validators can raise it directly.
    """
    code = ErrorCode.VALIDATION

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"code": self.code.value, "detail": self.detail}


class InvalidFormatError(SchedulerError):
    code = ErrorCode.INVALID_FORMAT


class OutOfRangeError(SchedulerError):
    code = ErrorCode.OUT_OF_RANGE


class SlotValidationError(SchedulerError):
    code = ErrorCode.VALIDATION

    def __init__(self, field: Optional[str], reason: str):
        super().__init__(f"{field}: {reason}" if field else reason)
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        return {"code": self.code.value, "field": self.field, "detail": self.reason}


class EmptySelectionError(SchedulerError):
    code = ErrorCode.EMPTY_SELECTION


class ImportPayloadError(SchedulerError):
    code = ErrorCode.IMPORT


class PersistenceError(SchedulerError):
    code = ErrorCode.PERSISTENCE
