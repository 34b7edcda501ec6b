from fastapi import APIRouter, Query

from timeutils import duration_between, end_time

time_router = APIRouter(
    prefix="/time",
    tags=["Time"]
)

@time_router.get("/duration", tags=["Time"])
def get_duration(start: str = Query(...), end: str = Query(...)):
    """
    Duration in hours between the start and end pickers of the slot editor.

    An end before the start runs over midnight; equal values give one hour.
    """
    return {"duration": duration_between(start, end)}

@time_router.get("/end", tags=["Time"])
def get_end_time(start: str = Query(...), duration: float = Query(..., gt=0)):
    return {"endTime": end_time(start, duration)}
