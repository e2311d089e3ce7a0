"""Day-level allocation of study sessions into time slots."""

import random
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from studyplan.schemas import StudySlot, WeightedSubject
from studyplan.topics import cognitive_load_for, session_type, slot_priority, topic_for_week

TIME_SLOTS = {
    "morning": {
        "high": ["6:00-7:30 AM", "7:30-9:00 AM"],
        "medium": ["9:00-10:30 AM", "10:30 AM-12:00 PM"],
        "low": ["12:00-1:00 PM"],
    },
    "afternoon": {
        "high": ["12:00-1:30 PM", "1:30-3:00 PM"],
        "medium": ["3:00-4:30 PM", "4:30-6:00 PM"],
        "low": ["6:00-7:00 PM"],
    },
    "evening": {
        "high": ["6:00-7:30 PM", "7:30-9:00 PM"],
        "medium": ["9:00-10:30 PM", "10:30 PM-12:00 AM"],
        "low": ["12:00-1:00 AM"],
    },
    "night": {
        "high": ["10:00 PM-11:30 PM", "11:30 PM-1:00 AM"],
        "medium": ["1:00-2:30 AM", "2:30-4:00 AM"],
        "low": ["4:00-5:00 AM"],
    },
}

BUFFER_ACTIVITIES = [
    "Quick Review & Notes",
    "Practice Previous Topics",
    "Solve Sample Papers",
    "Watch Tutorial Videos",
    "Group Discussion Prep",
    "Self-Assessment Quiz",
    "Relaxation & Rest",
    "Weekend Catch-up",
]

BUFFER_SUBJECT = "Buffer Time"
EXAM_RELEVANCE = 0.5
EXAM_BOOST_PRESSURE = 0.5

WEEKEND_DAYS = ("Saturday", "Sunday")


class DayAllocation(BaseModel):
    """Slots placed on one day plus the hours each subject received"""
    model_config = ConfigDict(frozen=True)

    day: str
    slots: List[StudySlot] = Field(default_factory=list)
    hours_by_subject: Dict[str, int] = Field(default_factory=dict)

    @property
    def total_hours(self) -> int:
        return sum(slot.hours for slot in self.slots)


def is_weekend(day: str) -> bool:
    return day in WEEKEND_DAYS


def budget_for_day(day: str, weekday_hours: int, weekend_hours: int) -> int:
    return weekend_hours if is_weekend(day) else weekday_hours


def exam_relevance(subject: WeightedSubject, exam_date: Optional[date]) -> float:
    """Every subject is equally exam-relevant while an exam date is set"""
    return EXAM_RELEVANCE if exam_date else 0.0


def generate_time_slot(preferred_time: str, slot_index: int, cognitive_load: str) -> str:
    band = TIME_SLOTS.get(preferred_time, TIME_SLOTS["evening"])
    slots = band.get(cognitive_load, band["medium"])
    return slots[slot_index % len(slots)]


def buffer_activity(week_number: int) -> str:
    return BUFFER_ACTIVITIES[(week_number - 1) % len(BUFFER_ACTIVITIES)]


def allocate_day(
    weighted_subjects: List[WeightedSubject],
    available_hours: int,
    preferred_time: str,
    exam_pressure: float,
    exam_date: Optional[date] = None,
    *,
    day: str = "Monday",
    current_week: int = 1,
    total_weeks: int = 1,
    rng: Optional[random.Random] = None,
) -> DayAllocation:
    """
    Place at most one session per subject into a day's hour budget.

    Subjects are visited by exam relevance (under exam pressure) then weight.
    Each gets min(daily_hours, remaining) hours, plus one extra hour when
    exam pressure exceeds 0.5. Unused time becomes a single buffer slot, so the
    slots of a day add up to its budget; a day used up exactly by sessions
    gets no buffer.

    Args:
        weighted_subjects: Subjects with weekly/daily hours already allocated
        available_hours: Hour budget for this day
        preferred_time: morning, afternoon, evening or night
        exam_pressure: 0-1 pressure shared by the whole week
        exam_date: Optional exam date
        day: Weekday name, recorded on the result
        current_week: 1-based plan week, drives topic and buffer rotation
        total_weeks: Plan length used by topic selection
        rng: Randomness source for the session-type coin flip

    Returns:
        DayAllocation with the day's slots and per-subject hours
    """
    rng = rng or random.Random()

    if exam_pressure > 0:
        def sort_key(subject):
            return (exam_relevance(subject, exam_date), subject.weight)
    else:
        def sort_key(subject):
            return subject.weight
    ordered = sorted(weighted_subjects, key=sort_key, reverse=True)

    remaining = available_hours
    slots: List[StudySlot] = []
    hours_by_subject: Dict[str, int] = {}

    for subject in ordered:
        if remaining <= 0:
            break

        hours = min(subject.daily_hours, remaining)
        if exam_pressure > EXAM_BOOST_PRESSURE and exam_relevance(subject, exam_date) > 0:
            hours = min(hours + 1, remaining)

        if hours <= 0:
            continue

        topic = topic_for_week(subject, current_week, total_weeks)
        kind = session_type(subject, topic, rng)
        load = cognitive_load_for(kind)

        slots.append(StudySlot(
            subject=subject.name,
            topic=topic,
            hours=hours,
            time=generate_time_slot(preferred_time, len(slots), load),
            cognitive_load=load,
            type=kind,
            priority=slot_priority(subject, exam_pressure),
        ))

        remaining -= hours
        hours_by_subject[subject.name] = hours_by_subject.get(subject.name, 0) + hours

    if remaining > 0:
        slots.append(StudySlot(
            subject=BUFFER_SUBJECT,
            topic=buffer_activity(current_week),
            hours=remaining,
            time=generate_time_slot(preferred_time, len(slots), "low"),
            cognitive_load="low",
            type="buffer",
            priority="low",
        ))

    return DayAllocation(day=day, slots=slots, hours_by_subject=hours_by_subject)
