"""Week planning: hour allocation per subject and day-by-day scheduling."""

import math
import random
from datetime import date, timedelta
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from studyplan.allocator import allocate_day, budget_for_day
from studyplan.schemas import WEEKDAYS, WeekSchedule, WeightedSubject
from studyplan.weights import round_half_up, weeks_until

# Share of the weekly budget given to subjects; the rest is buffer
SUBJECT_BUDGET_SHARE = 0.9


class WeekConfig(BaseModel):
    """Inputs shared by every day of the planned week"""
    weekday_hours: int = Field(ge=0)
    weekend_hours: int = Field(ge=0)
    preferred_time: str = "evening"
    current_week: int = 1
    total_weeks: int = 1
    exam_date: Optional[date] = None
    today: Optional[date] = None


class WeekPlan(BaseModel):
    schedule: WeekSchedule
    subjects: List[WeightedSubject]
    exam_pressure: float = 0.0


def weekly_budget(weekday_hours: int, weekend_hours: int) -> int:
    return weekday_hours * 5 + weekend_hours * 2


def allocate_weekly_hours(
    weighted_subjects: List[WeightedSubject],
    weekday_hours: int,
    weekend_hours: int,
) -> List[WeightedSubject]:
    """Split 90% of the weekly budget across subjects by weight"""
    total_weight = sum(subject.weight for subject in weighted_subjects)
    budget = weekly_budget(weekday_hours, weekend_hours)

    allocated = []
    for subject in weighted_subjects:
        share = subject.weight / total_weight if total_weight else 0.0
        weekly_hours = max(1, round_half_up(share * budget * SUBJECT_BUDGET_SHARE))
        daily_hours = max(1, math.ceil(weekly_hours / 7))
        allocated.append(subject.model_copy(update={
            "weekly_hours": weekly_hours,
            "daily_hours": daily_hours,
            "hours_allocated": 0,
        }))
        logger.debug(f"{subject.name}: {weekly_hours}h/week, {daily_hours}h/day")
    return allocated


def exam_pressure(exam_date: Optional[date], current_week: int = 1, today: Optional[date] = None) -> float:
    """
    Exam pressure for the planned week on a 0-1 scale.

    Weeks until the exam are counted from the start of the planned week,
    so later weeks of the plan feel more pressure.
    """
    if not exam_date:
        return 0.0

    today = today or date.today()
    week_start = today + timedelta(days=7 * (max(1, current_week) - 1))
    weeks = weeks_until(exam_date, week_start)

    if weeks <= 0:
        return 1.0
    if weeks <= 1:
        return 0.9
    if weeks <= 2:
        return 0.7
    if weeks <= 3:
        return 0.5
    return max(0.0, 1 - weeks / 12)


def plan_week(
    weighted_subjects: List[WeightedSubject],
    config: WeekConfig,
    rng: Optional[random.Random] = None,
) -> WeekPlan:
    """
    Build one week's schedule from weighted subjects.

    Args:
        weighted_subjects: Output of the weight model
        config: Hour budgets, preferences and week position
        rng: Randomness source for session typing

    Returns:
        WeekPlan with the Monday-Sunday schedule and subjects carrying
        their weekly, daily and allocated hours
    """
    rng = rng or random.Random()
    subjects = allocate_weekly_hours(weighted_subjects, config.weekday_hours, config.weekend_hours)
    pressure = exam_pressure(config.exam_date, config.current_week, config.today)
    logger.debug(f"Planning week {config.current_week}/{config.total_weeks} with exam pressure {pressure:.2f}")

    schedule: WeekSchedule = {}
    allocated_hours: Dict[str, int] = {}
    for day in WEEKDAYS:
        allocation = allocate_day(
            subjects,
            budget_for_day(day, config.weekday_hours, config.weekend_hours),
            config.preferred_time,
            pressure,
            config.exam_date,
            day=day,
            current_week=config.current_week,
            total_weeks=config.total_weeks,
            rng=rng,
        )
        schedule[day] = allocation.slots
        for name, hours in allocation.hours_by_subject.items():
            allocated_hours[name] = allocated_hours.get(name, 0) + hours

    subjects = [
        subject.model_copy(update={"hours_allocated": allocated_hours.get(subject.name, 0)})
        for subject in subjects
    ]
    return WeekPlan(schedule=schedule, subjects=subjects, exam_pressure=pressure)
