import asyncio
import json
import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

# test environment
os.environ["TESTING"] = "1"

from app import app
from database import engine, schedule_store, session_registry
from models import Base
from routes.websocket import active_connections, broadcast_schedule_event

client = TestClient(app)

USER = "ben"
BASE = f"/schedules/{USER}"

@pytest.fixture(autouse=True)
def setup_db():
    session_registry.clear()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    session_registry.clear()

def seed(records):
    schedule_store.write_all(USER, records)

def slot(id, color, duration, day="Monday"):
    return {"id": id, "title": id, "day": day, "startTime": "08:00", "duration": duration, "color": color}

# =========================================================
# TEST: GET /summary
# =========================================================
def test_summary():
    seed([slot("1", "#a", 1), slot("2", "#a", 2), slot("3", "#b", 1)])

    response = client.get(f"{BASE}/summary")
    assert response.status_code == 200

    data = response.json()
    assert data["byColor"] == {"#a": 3, "#b": 1}
    assert list(data["byColor"]) == ["#a", "#b"]
    assert data["total"] == 4
    assert data["entries"][0]["label"] == "3h"

# =========================================================
# TEST: GET /export
# =========================================================
def test_export():
    seed([slot("1", "#a", 1)])

    response = client.get(f"{BASE}/export")
    assert response.status_code == 200
    assert f"timeline_backup_{date.today().isoformat()}.json" in response.headers["content-disposition"]
    assert response.json()[0]["id"] == "1"

# =========================================================
# TEST: POST /import
# =========================================================
def test_import_without_confirmation():
    seed([slot("1", "#a", 1)])

    response = client.post(f"{BASE}/import", content=json.dumps([slot("9", "#c", 2)]))
    assert response.status_code == 200
    assert response.json() == {"success": True, "replaced": False, "count": 1}
    assert [s["id"] for s in client.get(f"{BASE}/slots").json()] == ["1"]

def test_import_confirmed():
    seed([slot("1", "#a", 1)])

    response = client.post(f"{BASE}/import?confirm=true", content=json.dumps([slot("9", "#c", 2, day="2024-02-02")]))
    assert response.status_code == 200
    assert response.json()["replaced"] is True

    stored = schedule_store.read(USER)
    assert [(s["id"], s["day"]) for s in stored] == [("9", "Friday")]

@pytest.mark.parametrize("body", ["{broken", json.dumps({"slots": []})])
def test_import_rejected(body):
    seed([slot("1", "#a", 1)])

    response = client.post(f"{BASE}/import?confirm=true", content=body)
    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["code"] == "IMPORT"
    assert [s["id"] for s in client.get(f"{BASE}/slots").json()] == ["1"]

# =========================================================
# TEST: /time
# =========================================================
def test_duration():
    assert client.get("/time/duration", params={"start": "23:00", "end": "01:00"}).json() == {"duration": 2.0}
    assert client.get("/time/duration", params={"start": "09:00", "end": "09:00"}).json() == {"duration": 1.0}

def test_duration_invalid():
    response = client.get("/time/duration", params={"start": "9", "end": "10:00"})
    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["code"] == "INVALID_FORMAT"

def test_end_time():
    assert client.get("/time/end", params={"start": "22:30", "duration": 2}).json() == {"endTime": "00:30"}

# =========================================================
# TEST: WS /ws/schedules/{user_id}
# =========================================================
def test_websocket_sends_snapshot_on_connect():
    seed([slot("1", "#a", 1)])

    with client.websocket_connect(f"/ws/schedules/{USER}") as websocket:
        message = websocket.receive_json()

    assert message["event"] == "SCHEDULE_SNAPSHOT"
    assert [s["id"] for s in message["data"]] == ["1"]

class ClosedWebSocket:
    async def send_text(self, message):
        raise RuntimeError("websocket is closed")

def test_broadcast_drops_closed_connections():
    active_connections["gil@example.com"].append(ClosedWebSocket())

    asyncio.run(broadcast_schedule_event("gil@example.com", []))

    assert "gil@example.com" not in active_connections

def test_root():
    assert client.get("/").json() == {"success": True}
