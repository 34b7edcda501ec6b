from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base
from settings import get_app_config
from schedule_session import ScheduleSession, SessionRegistry
from store import ScheduleStore

config = get_app_config()

if config["testing"]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
else:
    if not config["database_url"]:
        raise RuntimeError("DATABASE_URL is not set")
    engine = create_engine(config["database_url"], pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

schedule_store = ScheduleStore(SessionLocal)

# idempotent, also under test
Base.metadata.create_all(bind=engine)

session_registry = SessionRegistry(schedule_store)

def get_schedule_session(user_id: str) -> ScheduleSession:
    return session_registry.get(user_id)
