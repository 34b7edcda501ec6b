import logging

from fastapi import APIRouter, Depends, HTTPException

from database import get_schedule_session
from errors import SchedulerError
from models import RecurringRequest, SlotCreate, SlotMove, SlotUpdate
from routes.websocket import broadcast_schedule_event
from schedule_session import ScheduleSession

logger = logging.getLogger(__name__)

slot_router = APIRouter(
    prefix="/schedules/{user_id}",
    tags=["Slot"]
)


async def _publish(session: ScheduleSession):
    if session.last_sync_error is None:
        await broadcast_schedule_event(session.user_id, session.records())


@slot_router.get("/slots", tags=["Slot"])
def get_all_slots(session: ScheduleSession = Depends(get_schedule_session)):
    """
    Retrieves all slots of a user's schedule, normalized to weekday names.

    Returns:
        list: The slot records.
    """
    return [slot.to_record() for slot in session.list_slots()]

@slot_router.get("/slots/{slot_id}", tags=["Slot"])
def get_slot(slot_id: str, session: ScheduleSession = Depends(get_schedule_session)):
    slot = session.get_slot(slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return slot.to_record()

@slot_router.post("/slots", tags=["Slot"])
async def create_slot(slot: SlotCreate, session: ScheduleSession = Depends(get_schedule_session)):
    """
    Creates a slot, or one slot per selected weekday when ``selectedDays`` is given.

    Args:
        slot (SlotCreate): The slot draft with either ``day`` or ``selectedDays``.

    Returns:
        dict: A success flag, the created slots and the sync state.
    """
    try:
        created = session.save_draft(slot)
        await _publish(session)
        return {"success": True, "created_slots": [s.to_record() for s in created], **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to create slot")
        raise HTTPException(status_code=500, detail=str(e))

@slot_router.post("/slots/recurring", tags=["Slot"])
async def create_recurring_slots(request: RecurringRequest, session: ScheduleSession = Depends(get_schedule_session)):
    """
    Expands a draft into one slot per weekday, in Monday..Sunday order.

    An empty weekday selection is rejected with EMPTY_SELECTION.
    """
    try:
        created = session.add_recurring(request.draft, request.days)
        await _publish(session)
        return {"success": True, "created_slots": [s.to_record() for s in created], **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to create recurring slots")
        raise HTTPException(status_code=500, detail=str(e))

@slot_router.put("/slots/{slot_id}", tags=["Slot"])
async def update_slot(slot_id: str, slot: SlotUpdate, session: ScheduleSession = Depends(get_schedule_session)):
    """
    Merges the submitted fields onto the stored slot; omitted fields stay as they are.
    """
    try:
        updated = session.edit_slot(slot_id, slot.model_dump(exclude_unset=True, by_alias=True))
        if not updated:
            raise HTTPException(status_code=404, detail="Slot not found")
        await _publish(session)
        return {"success": True, "updated_slot": updated.to_record(), **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to update slot %s", slot_id)
        raise HTTPException(status_code=500, detail=str(e))

@slot_router.post("/slots/{slot_id}/move", tags=["Slot"])
async def move_slot(slot_id: str, move: SlotMove, session: ScheduleSession = Depends(get_schedule_session)):
    """
    Applies a drag: snaps the new start to the quarter hour and keeps it inside the day.

    Args:
        move (SlotMove): Vertical pointer delta in pixels and the day the slot was dropped on.
    """
    try:
        moved = session.move_slot(slot_id, move.delta, move.day)
        if not moved:
            raise HTTPException(status_code=404, detail="Slot not found")
        await _publish(session)
        return {"success": True, "moved_slot": moved.to_record(), **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to move slot %s", slot_id)
        raise HTTPException(status_code=500, detail=str(e))

@slot_router.delete("/slots/{slot_id}", tags=["Slot"])
async def delete_slot(slot_id: str, session: ScheduleSession = Depends(get_schedule_session)):
    try:
        if not session.delete_slot(slot_id):
            raise HTTPException(status_code=404, detail="Slot not found")
        await _publish(session)
        return {"success": True, "message": f"Slot with ID {slot_id} deleted", **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to delete slot %s", slot_id)
        raise HTTPException(status_code=500, detail=str(e))
