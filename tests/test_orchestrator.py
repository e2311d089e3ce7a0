"""Tests for plan generation and the planning session."""

import json
import random
from datetime import date, timedelta

import pytest

from studyplan.orchestrator import PlanSession, calculate_total_weeks, generate_plan
from studyplan.schemas import ConfidenceUpdate
from studyplan.weights import round_half_up


@pytest.mark.parametrize("days,expected", [(0, 1), (1, 1), (14, 2), (15, 3), (-21, 3), (84, 12), (400, 52)])
def test_total_weeks_is_clamped(today: date, days: int, expected: int) -> None:
    assert calculate_total_weeks(today + timedelta(days=days), today) == expected


def test_generate_plan_totals(student_input, today: date, rng) -> None:
    plan = generate_plan(student_input, rng=rng, today=today)

    assert plan.total_weeks == 12
    assert plan.total_hours == (4 * 5 + 6 * 2) * 12
    assert plan.outcomes.total_hours == plan.total_hours
    assert plan.current_week == 1
    assert [s.name for s in plan.weighted_subjects] == [s.name for s in student_input.subjects]
    assert all(s.weekly_hours >= 1 for s in plan.weighted_subjects)


def test_same_seed_gives_identical_plans(student_input, today: date) -> None:
    first = generate_plan(student_input, current_week=4, rng=random.Random(3), today=today)
    second = generate_plan(student_input, current_week=4, rng=random.Random(3), today=today)

    assert json.dumps(first.model_dump(mode="json")) == json.dumps(second.model_dump(mode="json"))


def test_plan_is_plain_json(student_input, today: date, rng) -> None:
    data = json.loads(json.dumps(generate_plan(student_input, rng=rng, today=today).model_dump(mode="json")))

    assert set(data) >= {"weekly_schedule", "insights", "outcomes", "weighted_subjects", "total_weeks", "total_hours"}
    monday = data["weekly_schedule"]["Monday"]
    assert monday[0]["duration"].endswith(("hour", "hours"))


def test_current_week_is_clamped_to_plan_length(student_input, today: date, rng) -> None:
    assert generate_plan(student_input, current_week=99, rng=rng, today=today).current_week == 12
    assert generate_plan(student_input, current_week=0, rng=rng, today=today).current_week == 1


def test_weight_overrides_replace_computed_weights(student_input, today: date, rng) -> None:
    plan = generate_plan(student_input, weight_overrides={"Operating Systems": 500}, rng=rng, today=today)
    weights = {s.name: s.weight for s in plan.weighted_subjects}

    assert weights["Operating Systems"] == 500
    assert weights["Data Structures"] == 75


def test_exam_today_gives_full_pressure(student_input, today: date, rng) -> None:
    exam_today = student_input.model_copy(update={"exam_date": today})
    assert generate_plan(exam_today, rng=rng, today=today).exam_pressure == 1.0


def test_session_navigation_is_clamped(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=1, today=today)
    session.generate()

    assert session.previous_week().current_week == 1
    assert session.next_week().current_week == 2
    assert session.change_week(100).current_week == 12
    assert session.next_week().current_week == 12


def test_navigation_keeps_weights(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=1, today=today)
    weights = [s.weight for s in session.generate().weighted_subjects]

    later = session.change_week(5)
    assert [s.weight for s in later.weighted_subjects] == weights
    assert later.insights.weekly_goals[0].target == "Week 6"


def test_navigation_matches_fresh_generation(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=9, today=today)
    session.generate()
    navigated = session.change_week(2)

    fresh = generate_plan(student_input, current_week=3, rng=random.Random(9), today=today)
    assert navigated.model_dump() == fresh.model_dump()


def test_adapt_schedule_decays_weight_without_replanning(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=1, today=today)
    plan = session.generate()
    before = {s.name: s.weight for s in plan.weighted_subjects}

    subjects = session.adapt_schedule([ConfidenceUpdate(subject="Operating Systems", new_confidence=4)])
    adapted = {s.name: s for s in subjects}

    assert adapted["Operating Systems"].confidence == 4
    assert adapted["Operating Systems"].weight == round_half_up(before["Operating Systems"] * 0.9)
    assert adapted["Data Structures"].weight == before["Data Structures"]
    assert session.plan is plan
    assert {s.name: s.weight for s in plan.weighted_subjects} == before


def test_adapted_weights_carry_into_later_plans(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=1, today=today)
    session.generate()
    session.adapt_schedule([ConfidenceUpdate(subject="Operating Systems", new_confidence=4)])

    replanned = {s.name: s for s in session.generate().weighted_subjects}
    assert replanned["Operating Systems"].weight == session.weight_overrides["Operating Systems"]
    assert replanned["Operating Systems"].confidence == 4


def test_adapt_ignores_unknown_subjects(student_input, today: date) -> None:
    session = PlanSession(student_input, seed=1, today=today)
    session.generate()
    before = [s.model_dump() for s in session.weighted_subjects]

    session.adapt_schedule([ConfidenceUpdate(subject="Chemistry", new_confidence=5)])
    assert [s.model_dump() for s in session.weighted_subjects] == before
    assert session.weight_overrides == {}


def test_session_snapshot_round_trip(student_input, today: date) -> None:
    session = PlanSession(student_input, current_week=3, seed=5, today=today)
    session.generate()
    session.adapt_schedule([ConfidenceUpdate(subject="Data Structures", new_confidence=5)])

    data = json.loads(json.dumps(session.snapshot()))
    restored = PlanSession.from_snapshot(data, today=today)

    assert restored.current_week == 3
    assert restored.weight_overrides == session.weight_overrides
    assert restored.generate().model_dump() == session.generate().model_dump()


def test_cognitive_distribution_matches_session_hours(student_input, today, rng) -> None:
    plan = generate_plan(student_input, rng=rng, today=today)
    session_hours = sum(
        slot.hours
        for slots in plan.weekly_schedule.values()
        for slot in slots
        if slot.type != "buffer"
    )
    assert plan.cognitive_distribution.total == session_hours
    assert plan.cognitive_distribution.total == sum(s.hours_allocated for s in plan.weighted_subjects)
