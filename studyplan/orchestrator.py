"""Top-level plan generation and the per-learner planning session."""

import math
import random
from datetime import date
from typing import Any, Dict, List, Optional

from loguru import logger

from studyplan.config import settings
from studyplan.insights import cognitive_distribution, generate_insights, generate_outcomes, next_seven_days
from studyplan.schemas import ConfidenceUpdate, Plan, StudentInput, WeightedSubject
from studyplan.week_planner import WeekConfig, plan_week, weekly_budget
from studyplan.weights import compute_weights, round_half_up


def calculate_total_weeks(target_date: date, today: Optional[date] = None, max_weeks: Optional[int] = None) -> int:
    """Weeks between today and the target date, clamped to [1, max_weeks]"""
    today = today or date.today()
    max_weeks = max_weeks or settings.max_plan_weeks
    weeks = math.ceil(abs((target_date - today).days) / 7)
    return max(1, min(weeks, max_weeks))


def apply_weight_overrides(
    weighted_subjects: List[WeightedSubject],
    weight_overrides: Optional[Dict[str, int]] = None,
) -> List[WeightedSubject]:
    if not weight_overrides:
        return weighted_subjects
    return [
        subject.model_copy(update={"weight": max(0, weight_overrides[subject.name])})
        if subject.name in weight_overrides else subject
        for subject in weighted_subjects
    ]


def build_plan(
    student_input: StudentInput,
    weighted_subjects: List[WeightedSubject],
    *,
    total_weeks: int,
    current_week: int = 1,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Plan:
    """Run the week planner and insight generation for already-weighted subjects"""
    today = today or date.today()
    current_week = max(1, min(current_week, total_weeks))
    total_hours = weekly_budget(student_input.weekday_hours, student_input.weekend_hours) * total_weeks

    week = plan_week(
        weighted_subjects,
        WeekConfig(
            weekday_hours=student_input.weekday_hours,
            weekend_hours=student_input.weekend_hours,
            preferred_time=student_input.preferred_time,
            current_week=current_week,
            total_weeks=total_weeks,
            exam_date=student_input.exam_date,
            today=today,
        ),
        rng=rng,
    )

    return Plan(
        weekly_schedule=week.schedule,
        insights=generate_insights(week.subjects, week.schedule, student_input, current_week, today),
        outcomes=generate_outcomes(week.subjects, total_hours, total_weeks),
        weighted_subjects=week.subjects,
        total_weeks=total_weeks,
        total_hours=total_hours,
        current_week=current_week,
        exam_pressure=week.exam_pressure,
        next_seven_days=next_seven_days(week.schedule, today),
        cognitive_distribution=cognitive_distribution(week.schedule),
    )


def generate_plan(
    student_input: StudentInput,
    *,
    current_week: int = 1,
    weight_overrides: Optional[Dict[str, int]] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Plan:
    """
    Generate a complete study plan.

    Args:
        student_input: Subjects, hour budgets, time preference and dates
        current_week: 1-based week to schedule, clamped to the plan length
        weight_overrides: Subject name -> weight replacing the computed weight
        rng: Randomness source for session typing (seed it for reproducible plans)
        today: Reference date (defaults to today)

    Returns:
        Plan with the week schedule, insights, outcomes and weighted subjects
    """
    today = today or date.today()
    total_weeks = calculate_total_weeks(student_input.target_date, today)

    weighted = compute_weights(student_input.subjects, total_weeks, student_input.exam_date, today)
    weighted = apply_weight_overrides(weighted, weight_overrides)

    logger.info(f"Generating week {current_week} of {total_weeks} for {len(weighted)} subjects")
    return build_plan(
        student_input,
        weighted,
        total_weeks=total_weeks,
        current_week=current_week,
        rng=rng,
        today=today,
    )


class PlanSession:
    """
    Planning context owned by one learner.

    Holds the current week, the weighted subjects of the last generation and
    any adaptation-derived weight overrides. Week navigation replans with the
    cached weights; only adapt_schedule changes them.
    """

    def __init__(
        self,
        student_input: StudentInput,
        current_week: int = 1,
        seed: Optional[int] = None,
        weight_overrides: Optional[Dict[str, int]] = None,
        adaptation_factor: Optional[float] = None,
        today: Optional[date] = None,
    ):
        self.student_input = student_input
        self.current_week = max(1, current_week)
        self.seed = seed if seed is not None else settings.random_seed
        self.weight_overrides: Dict[str, int] = dict(weight_overrides or {})
        self.adaptation_factor = adaptation_factor if adaptation_factor is not None else settings.adaptation_factor
        self.today = today
        self.weighted_subjects: List[WeightedSubject] = []
        self.plan: Optional[Plan] = None

    def _rng(self) -> random.Random:
        # Fresh generator per call so identical calls give identical plans
        return random.Random(self.seed) if self.seed is not None else random.Random()

    def _today(self) -> date:
        return self.today or date.today()

    @property
    def total_weeks(self) -> int:
        return calculate_total_weeks(self.student_input.target_date, self._today())

    def generate(self) -> Plan:
        """Recompute weights and plan the current week"""
        self.current_week = min(self.current_week, self.total_weeks)
        self.plan = generate_plan(
            self.student_input,
            current_week=self.current_week,
            weight_overrides=self.weight_overrides,
            rng=self._rng(),
            today=self._today(),
        )
        self.weighted_subjects = list(self.plan.weighted_subjects)
        return self.plan

    def change_week(self, delta: int) -> Plan:
        """Move the current week by delta (clamped) and replan with cached weights"""
        if self.plan is None:
            self.generate()

        total_weeks = self.plan.total_weeks
        self.current_week = max(1, min(total_weeks, self.current_week + delta))
        logger.debug(f"Navigating to week {self.current_week} of {total_weeks}")

        self.plan = build_plan(
            self.student_input,
            self.weighted_subjects,
            total_weeks=total_weeks,
            current_week=self.current_week,
            rng=self._rng(),
            today=self._today(),
        )
        return self.plan

    def next_week(self) -> Plan:
        return self.change_week(1)

    def previous_week(self) -> Plan:
        return self.change_week(-1)

    def adapt_schedule(self, confidence_updates: List[ConfidenceUpdate]) -> List[WeightedSubject]:
        """
        Apply confidence updates to the cached subjects.

        Each updated subject takes its new confidence and loses
        adaptation_factor of its weight. Weights of other subjects are not
        renormalized and no replan happens here.
        """
        if self.plan is None:
            self.generate()

        by_name = {subject.name: index for index, subject in enumerate(self.weighted_subjects)}
        for update in confidence_updates:
            index = by_name.get(update.subject)
            if index is None:
                logger.warning(f"No cached subject named {update.subject!r}; update ignored")
                continue

            subject = self.weighted_subjects[index]
            weight = round_half_up(subject.weight * (1 - self.adaptation_factor))
            self.weighted_subjects[index] = subject.model_copy(update={
                "confidence": update.new_confidence,
                "weight": weight,
            })
            self.weight_overrides[subject.name] = weight
            self._update_input_confidence(subject.name, update.new_confidence)
            logger.info(f"Adapted {subject.name}: confidence {update.new_confidence}, weight {subject.weight} -> {weight}")

        return self.weighted_subjects

    def _update_input_confidence(self, name: str, confidence: int) -> None:
        subjects = [
            subject.model_copy(update={"confidence": confidence}) if subject.name == name else subject
            for subject in self.student_input.subjects
        ]
        self.student_input = self.student_input.model_copy(update={"subjects": subjects})

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data session state suitable for persistence"""
        return {
            "student_input": self.student_input.model_dump(mode="json"),
            "current_week": self.current_week,
            "seed": self.seed,
            "weight_overrides": dict(self.weight_overrides),
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any], today: Optional[date] = None) -> "PlanSession":
        return cls(
            StudentInput.model_validate(data["student_input"]),
            current_week=data.get("current_week", 1),
            seed=data.get("seed"),
            weight_overrides=data.get("weight_overrides"),
            today=today,
        )
