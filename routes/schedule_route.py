import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from database import get_schedule_session
from errors import SchedulerError
from routes.websocket import broadcast_schedule_event
from schedule_session import ScheduleSession

logger = logging.getLogger(__name__)

schedule_router = APIRouter(
    prefix="/schedules/{user_id}",
    tags=["Schedule"]
)

@schedule_router.get("/summary", tags=["Schedule"])
def get_summary(session: ScheduleSession = Depends(get_schedule_session)):
    """
    Total scheduled hours per color, largest first, plus the grand total.
    """
    return session.summary().model_dump(by_alias=True)

@schedule_router.get("/export", tags=["Schedule"])
def export_schedule(session: ScheduleSession = Depends(get_schedule_session)):
    """
    Downloads the schedule as a pretty-printed JSON backup named after today's date.
    """
    filename, text = session.export_json()
    return Response(
        content=text.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@schedule_router.post("/import", tags=["Schedule"])
async def import_schedule(request: Request, confirm: bool = Query(False), session: ScheduleSession = Depends(get_schedule_session)):
    """
    Replaces the whole schedule with an uploaded JSON backup.

    Without ``confirm=true`` the file is only checked and nothing changes.

    Returns:
        dict: Whether the schedule was replaced and how many slots the file holds.
    """
    body = await request.body()
    try:
        count = session.import_json(body, confirmed=confirm)
        if not confirm:
            return {"success": True, "replaced": False, "count": count}
        if session.last_sync_error is None:
            await broadcast_schedule_event(session.user_id, session.records())
        return {"success": True, "replaced": True, "count": count, **session.sync_status()}
    except (HTTPException, SchedulerError):
        raise
    except Exception as e:
        logger.exception("Failed to import schedule")
        raise HTTPException(status_code=500, detail=str(e))
