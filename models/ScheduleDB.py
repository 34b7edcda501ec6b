from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class ScheduleDB(Base):
    __tablename__ = "schedules"

    # one document per user, keyed by identity
    user_id = Column(String, primary_key=True, index=True)
    slots = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))
