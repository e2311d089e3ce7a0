from studyplan.crud.snapshot import (
    SUBJECTS_KEY,
    SCHEDULE_KEY,
    SESSION_KEY,
    SNAPSHOT_KEYS,
    save_snapshot,
    load_snapshot,
    delete_snapshots
)

__all__ = [
    "SUBJECTS_KEY",
    "SCHEDULE_KEY",
    "SESSION_KEY",
    "SNAPSHOT_KEYS",
    "save_snapshot",
    "load_snapshot",
    "delete_snapshots",
]
