"""Shared fixtures for the study planner tests."""

import random
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studyplan.database import Base
from studyplan.sample_data import sample_student_input
from studyplan.schemas import StudentInput, Subject


@pytest.fixture
def today() -> date:
    """A fixed Monday so weekday-dependent output is stable."""
    return date(2026, 3, 2)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def student_input(today: date) -> StudentInput:
    return sample_student_input(today)


@pytest.fixture
def single_subject_input(today: date) -> StudentInput:
    return StudentInput(
        subjects=[Subject(name="Data Structures", credits=4, confidence=2, cognitive_load="high",
                          weak_areas="Trees,Graphs", strong_areas="Arrays", priority=1)],
        weekday_hours=4,
        weekend_hours=2,
        preferred_time="morning",
        target_date=date(2026, 5, 25),
    )


@pytest.fixture
def db():
    """In-memory SQLite session with all tables created."""
    import studyplan.models  # noqa: F401

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
