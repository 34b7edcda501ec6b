import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from errors import PersistenceError, SchedulerError
from routes.schedule_route import schedule_router
from routes.slot_route import slot_router
from routes.time_route import time_router
from routes.websocket import websocket_router
from settings import get_app_config

config = get_app_config()

logging.basicConfig(
    level=config["log_level"], format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Timeline Scheduler")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(slot_router)
app.include_router(schedule_router)
app.include_router(time_router)
app.include_router(websocket_router)

@app.exception_handler(SchedulerError)
async def scheduler_error_handler(request: Request, exc: SchedulerError):
    """
    Turns scheduling errors into a 400 response listing the error code.

    Persistence failures on a read mean the schedule is unavailable (503).
    """
    status_code = 503 if isinstance(exc, PersistenceError) else 400
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"success": False, "errors": [exc.to_dict()]}},
    )

@app.get("/")
async def base_path():
    """
    Root endpoint to verify that the API is running.

    Returns:
        dict: A success message.
    """
    return {"success": True}
