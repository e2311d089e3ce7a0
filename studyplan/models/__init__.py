from studyplan.models.snapshot import Snapshot

__all__ = [
    "Snapshot"
]
