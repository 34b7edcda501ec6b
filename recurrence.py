import logging
from typing import Callable, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from errors import EmptySelectionError, SlotValidationError
from helper import new_slot_id, to_slot_validation_error, validate_slot
from models import Slot, SlotDraft, Weekday, WEEKDAYS

logger = logging.getLogger(__name__)


def expand_recurring(
    draft: Union[SlotDraft, Mapping],
    days: Iterable[Union[Weekday, str]],
    id_factory: Optional[Callable[[], str]] = None,
    taken_ids: Optional[set] = None,
) -> list[Slot]:
    """
    Expands a recurring slot draft into one concrete slot per selected weekday.

    Output follows the canonical Monday..Sunday order regardless of the
    order the days were selected in, so identical selections always yield
    the same sequence of days.

    Args:
        draft: Title, start time, duration, color and description shared by every instance.
        days: The selected weekdays; duplicates collapse.
        id_factory: Optional id generator, defaults to a random unique id.
        taken_ids: Ids already used in the schedule that must not be handed out.

    Returns:
        list[Slot]: The generated slots, each with a fresh id.

    Raises:
        EmptySelectionError: If no weekday was selected.
    """
    if not isinstance(draft, SlotDraft):
        try:
            draft = SlotDraft.model_validate(draft)
        except ValidationError as e:
            raise to_slot_validation_error(e) from e

    selected = set()
    for day in days:
        try:
            selected.add(Weekday(day))
        except ValueError:
            raise SlotValidationError("day", f"unknown weekday {day!r}")

    if not selected:
        raise EmptySelectionError("Select at least one weekday for a recurring slot")

    used = set(taken_ids or ())
    template = draft.model_dump(by_alias=True)
    generated = []
    for day in WEEKDAYS:
        if day not in selected:
            continue
        slot_id = id_factory() if id_factory else new_slot_id(used)
        if slot_id in used:
            raise SlotValidationError("id", f"duplicate slot id {slot_id!r}")
        used.add(slot_id)
        generated.append(validate_slot({**template, "id": slot_id, "day": day.value}))

    logger.debug("Expanded recurring slot %r into %d instances", draft.title, len(generated))
    return generated
