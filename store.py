import copy
import logging
from collections import defaultdict
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError
from models import ScheduleDB

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Optional[list]], None]
ErrorCallback = Callable[[PersistenceError], None]


class ScheduleStore:
    """
    Document store with one schedule document per user.

    Each document holds a single field, the ordered list of raw slot
    records. Every write replaces the whole list and notifies the
    subscribers of that user with the new snapshot.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self._subscribers: dict[str, list[tuple[SnapshotCallback, ErrorCallback]]] = defaultdict(list)

    def read(self, user_id: str) -> Optional[list]:
        """
        Reads the stored slot list of a user.

        Returns:
            list | None: The raw records, or None when the user has no document yet.

        Raises:
            PersistenceError: If the database cannot be read.
        """
        db = self._session_factory()
        try:
            doc = db.query(ScheduleDB).filter(ScheduleDB.user_id == user_id).first()
            if doc is None:
                return None
            return copy.deepcopy(doc.slots or [])
        except SQLAlchemyError as e:
            logger.error("Failed to read schedule for %s: %s", user_id, e)
            raise PersistenceError(f"Failed to read schedule: {e}") from e
        finally:
            db.close()

    def write_all(self, user_id: str, slots: list) -> None:
        """
        Upserts the slot list of a user, leaving other document fields untouched.

        Raises:
            PersistenceError: If the write fails; nothing is committed.
        """
        records = copy.deepcopy(list(slots))
        db = self._session_factory()
        try:
            doc = db.query(ScheduleDB).filter(ScheduleDB.user_id == user_id).first()
            if doc is None:
                doc = ScheduleDB(user_id=user_id, slots=records)
                db.add(doc)
            else:
                doc.slots = records
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to save schedule for %s: %s", user_id, e)
            raise PersistenceError(f"Failed to save changes: {e}") from e
        finally:
            db.close()

        self._notify(user_id, records)

    def subscribe(self, user_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Callable[[], None]:
        """
        Registers for live snapshots of a user's schedule.

        The current snapshot (None when absent) is delivered immediately,
        then again after every write.

        Returns:
            Callable: Removes the subscription when called.
        """
        entry = (on_snapshot, on_error)
        self._subscribers[user_id].append(entry)

        try:
            on_snapshot(self.read(user_id))
        except PersistenceError as e:
            on_error(e)

        def unsubscribe():
            entries = self._subscribers.get(user_id, [])
            if entry in entries:
                entries.remove(entry)
            if not entries:
                self._subscribers.pop(user_id, None)

        return unsubscribe

    def _notify(self, user_id: str, records: list) -> None:
        for on_snapshot, _ in list(self._subscribers.get(user_id, [])):
            on_snapshot(copy.deepcopy(records))
