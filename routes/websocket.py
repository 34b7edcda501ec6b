import json
import logging
from collections import defaultdict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from database import session_registry
from errors import PersistenceError

logger = logging.getLogger(__name__)

websocket_router = APIRouter(tags=["websocket"])

SNAPSHOT_EVENT = "SCHEDULE_SNAPSHOT"

# WebSocket connections per user
active_connections: dict[str, list[WebSocket]] = defaultdict(list)

@websocket_router.websocket("/ws/schedules/{user_id}")
async def websocket_endpoint(websocket: WebSocket, user_id: str):
    """
    WebSocket endpoint for live schedule snapshots.

    Sends the current schedule right after the connection is accepted and
    every full snapshot after that. Messages received from the client are
    ignored.

    Args:
        websocket (WebSocket): The incoming WebSocket connection.
        user_id (str): Whose schedule to follow.
    """
    await websocket.accept()
    try:
        session = session_registry.get(user_id)
    except PersistenceError as e:
        logger.error("Cannot open live schedule for %s: %s", user_id, e)
        await websocket.close(code=1011)
        return

    active_connections[user_id].append(websocket)
    try:
        await websocket.send_text(_message(session.records()))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Websocket for %s disconnected", user_id)
    finally:
        _drop_connection(user_id, websocket)

def _drop_connection(user_id: str, websocket: WebSocket):
    connections = active_connections.get(user_id, [])
    if websocket in connections:
        connections.remove(websocket)
    if not connections:
        active_connections.pop(user_id, None)

def _message(records: list) -> str:
    return json.dumps({
        "event": SNAPSHOT_EVENT,
        "data": records
    })

async def broadcast_schedule_event(user_id: str, records: list):
    """
    Sends a full schedule snapshot to every connection following this user.

    Args:
        user_id (str): The schedule owner.
        records (list): The complete slot list as stored.
    """
    message = _message(records)
    for connection in list(active_connections.get(user_id, [])):
        try:
            await connection.send_text(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning("Dropping dead websocket for %s: %s", user_id, e)
            _drop_connection(user_id, connection)
