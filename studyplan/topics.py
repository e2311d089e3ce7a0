"""Topic selection and session typing for a subject in a given week."""

import math
import random

from studyplan.schemas import Subject

GENERAL_PRACTICE = "General Practice"
PRACTICE_PROBLEMS = "Practice Problems"
REVISION_PREFIX = "Revision: "


def topic_for_week(subject: Subject, week_number: int, total_weeks: int) -> str:
    """
    Pick the topic a subject should cover in the given week.

    Weak areas are exhausted first, then strong areas are revised two
    topic-slots at a time, then the subject falls back to practice problems.

    Args:
        subject: Subject (or weighted subject) with parsed weak/strong areas
        week_number: 1-based week of the plan
        total_weeks: Configured length of the plan in weeks

    Returns:
        Topic string, prefixed with "Revision: " for strong-area revision
    """
    weak_areas = subject.weak_areas
    strong_areas = subject.strong_areas

    if not weak_areas and not strong_areas:
        return GENERAL_PRACTICE

    total_topics = len(weak_areas) + math.ceil(len(strong_areas) / 2)
    topics_per_week = max(1, total_topics // max(1, total_weeks))
    topic_index = (week_number - 1) * topics_per_week

    if topic_index < len(weak_areas):
        return weak_areas[topic_index]

    revision_index = (topic_index - len(weak_areas)) // 2
    if revision_index < len(strong_areas):
        return f"{REVISION_PREFIX}{strong_areas[revision_index]}"

    return PRACTICE_PROBLEMS


def session_type(subject: Subject, topic: str, rng: random.Random) -> str:
    """Classify a session; strong-area topics flip a coin between revision and practice"""
    topic_lower = topic.lower()

    if topic_lower.startswith(REVISION_PREFIX.strip().lower()):
        return "revision"

    if any(area.lower() in topic_lower for area in subject.weak_areas):
        return "concept-learning"

    if any(area.lower() in topic_lower for area in subject.strong_areas):
        return "revision" if rng.random() > 0.5 else "practice"

    return "practice"


def cognitive_load_for(kind: str) -> str:
    if kind == "concept-learning":
        return "high"
    if kind == "revision":
        return "low"
    return "medium"


def slot_priority(subject: Subject, exam_pressure: float) -> str:
    """Shaky subjects under exam pressure and heavy subjects get high priority"""
    if subject.confidence <= 2 and exam_pressure > 0.3:
        return "high"
    if subject.cognitive_load == "high":
        return "high"
    return "medium"
