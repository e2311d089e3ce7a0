"""Sample learner used by the CLI and tests."""

from datetime import date, timedelta
from typing import List, Optional

from studyplan.schemas import StudentInput, Subject


def sample_subjects() -> List[Subject]:
    return [
        Subject(
            name="Data Structures",
            credits=4,
            confidence=3,
            strong_areas="Arrays, Linked Lists",
            weak_areas="Trees, Graphs",
            cognitive_load="high",
            priority=1,
        ),
        Subject(
            name="Operating Systems",
            credits=3,
            confidence=2,
            strong_areas="Processes, Threads",
            weak_areas="Deadlocks, Memory Management",
            cognitive_load="medium",
            priority=2,
        ),
        Subject(
            name="Engineering Mathematics",
            credits=4,
            confidence=3,
            strong_areas="Differential Equations",
            weak_areas="Laplace Transform",
            cognitive_load="high",
            priority=3,
        ),
    ]


def sample_student_input(today: Optional[date] = None) -> StudentInput:
    """Three engineering subjects, 4h weekdays, 6h weekends, twelve weeks out"""
    today = today or date.today()
    return StudentInput(
        name="Sample Student",
        subjects=sample_subjects(),
        weekday_hours=4,
        weekend_hours=6,
        preferred_time="evening",
        target_date=today + timedelta(weeks=12),
        exam_date=today + timedelta(weeks=10),
    )
