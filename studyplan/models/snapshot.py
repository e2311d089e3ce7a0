from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime
from studyplan.database import Base

class Snapshot(Base):
    """Best-effort snapshot of plain planning data under a fixed key"""
    __tablename__ = "snapshots"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, nullable=False, index=True)  # "subjects", "current_schedule", "session"
    data = Column(JSON, nullable=False)
    saved_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
