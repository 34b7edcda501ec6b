import re
import uuid
from datetime import date
from typing import Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from errors import InvalidFormatError, SlotValidationError
from models import Slot, Weekday, WEEKDAYS
from timeutils import time_to_minutes

_LOOSE_TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def validate_slot(slot: Union[Slot, Mapping]) -> Slot:
    """
    Validates a raw slot record (or re-validates a Slot) against all slot invariants.

    Args:
        slot: A Slot or a mapping in the stored camelCase shape.

    Returns:
        Slot: The validated slot.

    Raises:
        SlotValidationError: With the offending field and the reason.
    """
    data = slot.to_record() if isinstance(slot, Slot) else slot
    try:
        return Slot.model_validate(data)
    except ValidationError as e:
        raise to_slot_validation_error(e) from e


def to_slot_validation_error(error: ValidationError) -> SlotValidationError:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    cause = first.get("ctx", {}).get("error")
    reason = str(cause) if cause is not None else first["msg"]
    return SlotValidationError(field, reason)


def validate_collection(slots: Iterable[Slot]) -> list[Slot]:
    """Checks the collection-level invariant: ids are unique within a schedule."""
    seen = set()
    result = []
    for slot in slots:
        if slot.id in seen:
            raise SlotValidationError("id", f"duplicate slot id {slot.id!r}")
        seen.add(slot.id)
        result.append(slot)
    return result


def normalize_start_time(raw: str) -> str:
    """Accepts "H:mm" or "HH:mm" and returns the zero-padded "HH:mm" form."""
    match = _LOOSE_TIME_PATTERN.fullmatch(raw) if isinstance(raw, str) else None
    if not match:
        raise InvalidFormatError(f"Start time must be in H:mm or HH:mm format, got {raw!r}")

    padded = f"{int(match.group(1)):02d}:{match.group(2)}"
    time_to_minutes(padded)
    return padded


def merge_slot(existing: Slot, patch: Mapping) -> Slot:
    """
    Shallow field-level merge of a partial record onto an existing slot.

    Fields absent from the patch keep their current value. The id is
    immutable; a patch carrying a different id is rejected.
    """
    patch_id = patch.get("id")
    if patch_id is not None and patch_id != existing.id:
        raise SlotValidationError("id", "slot id is immutable")

    merged = {**existing.to_record(), **{k: v for k, v in patch.items() if k != "id"}}
    return validate_slot(merged)


def new_slot_id(taken: Optional[set] = None) -> str:
    taken = taken or set()
    while True:
        candidate = uuid.uuid4().hex
        if candidate not in taken:
            return candidate


def weekday_name(d: date) -> Weekday:
    # date.weekday() is calendar arithmetic, independent of locale
    return WEEKDAYS[d.weekday()]


def today_weekday() -> Weekday:
    return weekday_name(date.today())
