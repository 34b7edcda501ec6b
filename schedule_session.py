import json
import logging
from datetime import date
from typing import Iterable, Mapping, Optional, Union

from errors import EmptySelectionError, ImportPayloadError, PersistenceError, SlotValidationError
from helper import merge_slot, new_slot_id, today_weekday, validate_collection, validate_slot
from migration import normalize_records
from models import DEFAULT_COLOR, DEFAULT_DURATION, DEFAULT_START_TIME, ScheduleSummary, Slot, SlotCreate, SlotDraft, Weekday
from recurrence import expand_recurring
from repositioning import reposition
from stats import summarize
from store import ScheduleStore

logger = logging.getLogger(__name__)

WELCOME_DESCRIPTION = "Welcome! This schedule is synced to the cloud."


def welcome_slot() -> Slot:
    return Slot(
        id="1",
        title="Welcome!",
        day=today_weekday(),
        start_time=DEFAULT_START_TIME,
        duration=DEFAULT_DURATION,
        color=DEFAULT_COLOR,
        description=WELCOME_DESCRIPTION,
    )


class ScheduleSession:
    """
    In-memory schedule of one user, kept in sync with the document store.

    Local mutations are applied first and then written as a whole. A failed
    write is reported through ``last_sync_error`` and the return value of the
    mutation but never rolled back. Every snapshot coming from the store
    replaces the local collection completely, so a local edit racing with
    an inbound snapshot can be lost.
    """

    def __init__(self, user_id: str, store: ScheduleStore):
        self.user_id = user_id
        self._store = store
        self._slots: list[Slot] = []
        # stored records that fail validation; kept and written back untouched
        self._quarantined: list = []
        self._unsubscribe = None
        self.loaded = False
        self.last_load_error: Optional[PersistenceError] = None
        self.last_sync_error: Optional[PersistenceError] = None

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------
    def open(self) -> "ScheduleSession":
        self._unsubscribe = self._store.subscribe(self.user_id, self.apply_snapshot, self._on_store_error)
        return self

    def close(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def apply_snapshot(self, doc: Optional[list]) -> None:
        if doc is None:
            self._slots = [welcome_slot()]
            self._quarantined = []
        else:
            self._slots, self._quarantined = self._partition(normalize_records(doc))
        self.loaded = True
        self.last_load_error = None
        logger.debug("Snapshot for %s applied: %d slot(s)", self.user_id, len(self._slots))

    def _partition(self, records: list) -> tuple[list[Slot], list]:
        valid, rejected, seen = [], [], set()
        for record in records:
            try:
                slot = validate_slot(record)
            except SlotValidationError as e:
                logger.warning("Quarantined invalid slot record for %s: %s", self.user_id, e.detail)
                rejected.append(record)
                continue
            if slot.id in seen:
                logger.warning("Quarantined slot with duplicate id %r for %s", slot.id, self.user_id)
                rejected.append(record)
                continue
            seen.add(slot.id)
            valid.append(slot)
        return valid, rejected

    def _on_store_error(self, error: PersistenceError) -> None:
        logger.error("Sync error for %s: %s", self.user_id, error)
        self.last_load_error = error

    def sync_status(self) -> dict:
        if self.last_sync_error is None:
            return {"synced": True}
        return {"synced": False, "warning": "Failed to save changes to cloud. Check your connection."}

    def records(self) -> list:
        return [slot.to_record() for slot in self._slots] + list(self._quarantined)

    def _commit(self, slots: list[Slot]) -> bool:
        self._slots = slots
        try:
            self._store.write_all(self.user_id, self.records())
        except PersistenceError as e:
            logger.error("Failed to save schedule for %s, keeping local changes: %s", self.user_id, e)
            self.last_sync_error = e
            return False
        self.last_sync_error = None
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_slots(self) -> list[Slot]:
        return list(self._slots)

    @property
    def quarantined(self) -> list:
        return list(self._quarantined)

    def get_slot(self, slot_id: str) -> Optional[Slot]:
        return next((s for s in self._slots if s.id == slot_id), None)

    def summary(self) -> ScheduleSummary:
        return summarize(self._slots)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_slot(self, data: Union[Slot, Mapping]) -> Slot:
        record = data.to_record() if isinstance(data, Slot) else dict(data)
        taken = {s.id for s in self._slots}
        if not record.get("id"):
            record["id"] = new_slot_id(taken)
        slot = validate_slot(record)
        new_slots = validate_collection(self._slots + [slot])
        self._commit(new_slots)
        return slot

    def add_recurring(self, draft: Union[SlotDraft, Mapping], days: Iterable[Union[Weekday, str]]) -> list[Slot]:
        generated = expand_recurring(draft, days, taken_ids={s.id for s in self._slots})
        self._commit(self._slots + generated)
        return generated

    def save_draft(self, data: SlotCreate) -> list[Slot]:
        """Creates a recurring series when weekdays are selected, otherwise a single slot."""
        draft = SlotDraft.model_validate(data.model_dump(by_alias=True, include=set(SlotDraft.model_fields)))
        try:
            return self.add_recurring(draft, data.selected_days)
        except EmptySelectionError:
            if data.day is None:
                raise
        return [self.add_slot({**draft.model_dump(by_alias=True), "day": data.day.value})]

    def edit_slot(self, slot_id: str, patch: Mapping) -> Optional[Slot]:
        existing = self.get_slot(slot_id)
        if existing is None:
            return None
        updated = merge_slot(existing, patch)
        self._commit([updated if s.id == slot_id else s for s in self._slots])
        return updated

    def delete_slot(self, slot_id: str) -> bool:
        if self.get_slot(slot_id) is None:
            return False
        self._commit([s for s in self._slots if s.id != slot_id])
        return True

    def move_slot(self, slot_id: str, delta: float, day: Union[Weekday, str]) -> Optional[Slot]:
        existing = self.get_slot(slot_id)
        if existing is None:
            return None
        moved = reposition(existing, delta, day)
        self._commit([moved if s.id == slot_id else s for s in self._slots])
        return moved

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------
    def export_json(self, today: Optional[date] = None) -> tuple[str, str]:
        today = today or date.today()
        if self._quarantined:
            logger.warning("Export for %s skips %d invalid record(s)", self.user_id, len(self._quarantined))
        text = json.dumps([slot.to_record() for slot in self._slots], indent=2, ensure_ascii=False)
        return f"timeline_backup_{today.isoformat()}.json", text

    def import_json(self, text: Union[str, bytes], confirmed: bool = False) -> int:
        """
        Replaces the whole schedule with the slots of an exported file.

        The payload is parsed and checked in full before anything changes.
        Without confirmation it is only checked.

        Returns:
            int: The number of slots in the payload.

        Raises:
            ImportPayloadError: On malformed JSON, a non-list top level or an invalid slot.
        """
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ImportPayloadError(f"Invalid file: {e}") from e

        if not isinstance(payload, list):
            raise ImportPayloadError("Invalid file: expected a list of slots")

        slots = []
        for index, record in enumerate(normalize_records(payload)):
            try:
                slots.append(validate_slot(record))
            except SlotValidationError as e:
                raise ImportPayloadError(f"Invalid slot at index {index}: {e.detail}") from e
        try:
            validate_collection(slots)
        except SlotValidationError as e:
            raise ImportPayloadError(f"Invalid file: {e.detail}") from e

        if not confirmed:
            return len(slots)

        logger.info("Replacing schedule of %s with %d imported slot(s)", self.user_id, len(slots))
        self._quarantined = []
        self._commit(slots)
        return len(slots)


class SessionRegistry:
    """One live schedule session per user for the lifetime of the process."""

    def __init__(self, store: ScheduleStore):
        self._store = store
        self._sessions: dict[str, ScheduleSession] = {}

    def get(self, user_id: str) -> ScheduleSession:
        session = self._sessions.get(user_id)
        if session is not None and session.loaded:
            return session

        if session is None:
            session = ScheduleSession(user_id, self._store).open()
            self._sessions[user_id] = session

        if not session.loaded:
            error = session.last_load_error
            session.close()
            del self._sessions[user_id]
            raise error or PersistenceError("Schedule could not be loaded")
        return session

    def clear(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
