"""Subject priority weighting.

Each subject's weight accumulates additively and multiplicatively:

    weight  = credits * 8
    weight += (5 - confidence) * 7
    weight *= cognitive multiplier (high 1.5, medium 1.2, low 1.0)
    weight += weak area count * 3
    weight *= 1.2              if the exam falls in the last 20% of the horizon
    weight *= 1 + (p - 1) * 0.1  for an explicit priority p

and is rounded half-up to an integer.
"""

import math
from datetime import date
from typing import List, Optional

from loguru import logger

from studyplan.schemas import FocusTopic, Subject, WeightedSubject

COGNITIVE_MULTIPLIERS = {"high": 1.5, "medium": 1.2, "low": 1.0}

CREDIT_WEIGHT = 8
CONFIDENCE_WEIGHT = 7
WEAK_AREA_WEIGHT = 3
EXAM_PROXIMITY_THRESHOLD = 0.2
EXAM_PROXIMITY_BONUS = 1.2
PRIORITY_STEP = 0.1


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's rounding)"""
    return math.floor(value + 0.5)


def weeks_until(target: date, today: date) -> int:
    """Whole weeks until target, rounding partial weeks up; negative once target has passed"""
    return math.ceil((target - today).days / 7)


def exam_proximity(exam_date: date, total_weeks: int, today: Optional[date] = None) -> float:
    """Fraction of the planning horizon left before the exam, clamped to [0, 1]"""
    today = today or date.today()
    ratio = weeks_until(exam_date, today) / max(1, total_weeks)
    return max(0.0, min(1.0, ratio))


def extract_focus_topics(subject: Subject) -> List[FocusTopic]:
    """Weak areas first as concept learning, then strong areas for revision"""
    topics = [
        FocusTopic(topic=topic, priority="high", type="concept-learning", order=index)
        for index, topic in enumerate(subject.weak_areas)
    ]
    offset = len(topics)
    topics.extend(
        FocusTopic(topic=topic, priority="low", type="revision", order=offset + index)
        for index, topic in enumerate(subject.strong_areas)
    )
    return topics


def compute_weight(
    subject: Subject,
    total_weeks: int,
    exam_date: Optional[date] = None,
    today: Optional[date] = None,
) -> WeightedSubject:
    """Derive the weighted copy of a single subject"""
    weight = float(subject.credits * CREDIT_WEIGHT)

    confidence_factor = (5 - subject.confidence) * CONFIDENCE_WEIGHT
    weight += confidence_factor

    cognitive_multiplier = COGNITIVE_MULTIPLIERS.get(subject.cognitive_load, 1.0)
    weight *= cognitive_multiplier

    weak_area_count = len(subject.weak_areas)
    weight += weak_area_count * WEAK_AREA_WEIGHT

    if exam_date and exam_proximity(exam_date, total_weeks, today) < EXAM_PROXIMITY_THRESHOLD:
        weight *= EXAM_PROXIMITY_BONUS

    if subject.priority:
        weight *= 1 + (subject.priority - 1) * PRIORITY_STEP

    return WeightedSubject(
        **subject.model_dump(),
        weight=max(0, round_half_up(weight)),
        focus_topics=extract_focus_topics(subject),
        weak_area_count=weak_area_count,
        confidence_factor=confidence_factor,
        cognitive_multiplier=cognitive_multiplier,
    )


def compute_weights(
    subjects: List[Subject],
    total_weeks: int,
    exam_date: Optional[date] = None,
    today: Optional[date] = None,
) -> List[WeightedSubject]:
    """
    Compute the priority weight of every subject for one planning run.

    Args:
        subjects: Subjects as entered by the learner
        total_weeks: Length of the planning horizon in weeks
        exam_date: Optional exam date; a near exam boosts every weight
        today: Reference date (defaults to today)

    Returns:
        WeightedSubject list in input order, hour fields still zero
    """
    weighted = [compute_weight(subject, total_weeks, exam_date, today) for subject in subjects]
    for subject in weighted:
        logger.debug(
            f"Weight for {subject.name}: {subject.weight} "
            f"(confidence factor {subject.confidence_factor}, "
            f"x{subject.cognitive_multiplier}, {subject.weak_area_count} weak areas)"
        )
    return weighted
