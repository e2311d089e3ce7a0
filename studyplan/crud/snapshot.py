from sqlalchemy.orm import Session
from studyplan.models import Snapshot
from datetime import datetime
from typing import Any, Iterable, Optional

SUBJECTS_KEY = "subjects"
SCHEDULE_KEY = "current_schedule"
SESSION_KEY = "session"

SNAPSHOT_KEYS = (SUBJECTS_KEY, SCHEDULE_KEY, SESSION_KEY)

def save_snapshot(db: Session, key: str, data: Any) -> Snapshot:
    """Create or replace the snapshot stored under key"""
    snapshot = db.query(Snapshot).filter(Snapshot.key == key).first()
    if snapshot:
        snapshot.data = data
        snapshot.saved_at = datetime.utcnow()
    else:
        snapshot = Snapshot(key=key, data=data)
        db.add(snapshot)
    db.commit()
    db.refresh(snapshot)
    return snapshot

def load_snapshot(db: Session, key: str) -> Optional[Any]:
    """Get the data stored under key, or None"""
    snapshot = db.query(Snapshot).filter(Snapshot.key == key).first()
    return snapshot.data if snapshot else None

def delete_snapshots(db: Session, keys: Iterable[str] = SNAPSHOT_KEYS) -> int:
    """Remove snapshots for the given keys; returns how many were deleted"""
    deleted = db.query(Snapshot).filter(Snapshot.key.in_(list(keys))).delete(synchronize_session=False)
    db.commit()
    return deleted
