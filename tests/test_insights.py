"""Tests for insights and projected outcomes."""

from datetime import date, timedelta

import pytest

from studyplan.insights import (
    adaptation_suggestions,
    cognitive_distribution,
    generate_insights,
    generate_outcomes,
    next_seven_days,
    prerequisite_checks,
    priority_focus,
    todays_todo,
    weekly_goals,
)
from studyplan.schemas import StudySlot, Subject
from studyplan.weights import compute_weights


def slot(subject: str, topic: str, kind: str = "concept-learning", hours: int = 1) -> StudySlot:
    return StudySlot(subject=subject, topic=topic, hours=hours, time="6:00-7:30 PM",
                     cognitive_load="high", type=kind, priority="high")


def buffer_slot() -> StudySlot:
    return StudySlot(subject="Buffer Time", topic="Quick Review & Notes", hours=1, time="12:00-1:00 AM",
                     cognitive_load="low", type="buffer", priority="low")


def test_priority_focus_orders_low_confidence_subjects_by_weight(student_input) -> None:
    weighted = compute_weights(student_input.subjects, 12)
    items = priority_focus(weighted)

    # Math 86, Data Structures 75, Operating Systems 66
    assert [(i.subject, i.topic, i.urgency) for i in items] == [
        ("Engineering Mathematics", "Laplace Transform", "medium"),
        ("Data Structures", "Trees", "medium"),
        ("Operating Systems", "Deadlocks", "high"),
    ]
    assert items[2].reason == "Low confidence (2/5)"


def test_priority_focus_skips_confident_or_weakless_subjects() -> None:
    subjects = [
        Subject(name="Physics", credits=3, confidence=4, weak_areas="Optics"),
        Subject(name="Chemistry", credits=3, confidence=2),
    ]
    assert priority_focus(compute_weights(subjects, 12)) == []


def test_prerequisite_checks_for_sample_subjects(student_input) -> None:
    checks = prerequisite_checks(compute_weights(student_input.subjects, 12))

    assert [(c.check.split(" →")[0], c.status) for c in checks] == [
        ("Arrays/Linked Lists", "complete"),
        ("Processes/Threads", "pending"),
        ("Differential Equations", "complete"),
        ("Basic concepts clear before advanced topics", "pending"),
    ]


def test_generic_prerequisite_check_is_always_present() -> None:
    checks = prerequisite_checks([])
    assert len(checks) == 1
    assert checks[0].status == "pending"
    assert checks[0].icon == "clock"


def test_adaptation_suggestions(student_input) -> None:
    subjects = student_input.subjects + [Subject(name="Physics", credits=2, confidence=5)]
    suggestions = adaptation_suggestions(compute_weights(subjects, 12), "morning")

    assert [s.suggestion for s in suggestions] == [
        "Increase Operating Systems time allocation by 30 minutes daily",
        "Reduce Physics focus to focus on weaker subjects",
        "Schedule high-cognitive subjects on different days",
        "Schedule morning as primary study time for complex topics",
    ]


def test_todays_todo_excludes_buffer(today: date) -> None:
    # today is a Monday
    schedule = {"Monday": [slot("Math", "Laplace Transform", hours=2), buffer_slot()], "Tuesday": [slot("OS", "Paging")]}
    todo = todays_todo(schedule, today)

    assert len(todo) == 1
    assert todo[0].task == "Study Laplace Transform in Math"
    assert todo[0].duration == "2 hours"


def test_weekly_goals(student_input) -> None:
    subjects = student_input.subjects + [Subject(name="Physics", credits=2, confidence=4)]
    goals = weekly_goals(compute_weights(subjects, 12), current_week=3)

    assert [(g.subject, g.goal, g.target, g.status) for g in goals] == [
        ("Data Structures", "Complete Trees this week", "Week 3", "On Track"),
        ("Operating Systems", "Complete Deadlocks this week", "Week 3", "In Progress"),
        ("Engineering Mathematics", "Complete Laplace Transform this week", "Week 3", "On Track"),
    ]


def test_generate_insights_bundles_everything(student_input, today: date) -> None:
    weighted = compute_weights(student_input.subjects, 12)
    insights = generate_insights(weighted, {"Monday": [slot("Math", "Laplace Transform")]}, student_input, 2, today)

    assert len(insights.priority_focus) == 3
    assert len(insights.prerequisites) == 4
    assert insights.adaptations[-1].condition == "Preferred time: evening"
    assert len(insights.todays_todo) == 1
    assert insights.weekly_goals[0].target == "Week 2"


def test_confidence_projection_is_capped_at_five(student_input) -> None:
    weighted = compute_weights(student_input.subjects, 12)

    short = generate_outcomes(weighted, total_hours=32, total_weeks=1)
    assert [(c.current, c.target, c.improvement) for c in short.confidence_improvements] == [
        (3, 4, 1), (2, 3, 1), (3, 4, 1),
    ]

    long = generate_outcomes(weighted, total_hours=384, total_weeks=12)
    assert all(c.target == 5 for c in long.confidence_improvements)


def test_outcome_timeline_and_time_saved(student_input) -> None:
    outcomes = generate_outcomes(compute_weights(student_input.subjects, 12), total_hours=288, total_weeks=12)

    assert outcomes.efficiency_gains.time_saved == "58 hours saved per week"
    assert outcomes.timeline.weak_areas_completion == "Week 7"
    assert outcomes.timeline.full_revision_start == "Week 9"
    assert outcomes.timeline.exam_preparation == "Last 1 weeks"
    assert outcomes.timeline.completion == "By Week 12"


def test_exam_prep_window_is_capped_at_two_weeks(student_input) -> None:
    outcomes = generate_outcomes(compute_weights(student_input.subjects, 40), total_hours=100, total_weeks=40)
    assert outcomes.timeline.exam_preparation == "Last 2 weeks"


def test_next_seven_days_starts_today(today: date) -> None:
    schedule = {
        "Monday": [buffer_slot(), slot("Math", "Laplace Transform")],
        "Wednesday": [slot("OS", "Paging", kind="practice")],
        "Sunday": [buffer_slot()],
    }
    focus = next_seven_days(schedule, today + timedelta(days=6))  # Sunday

    assert [(f.day_number, f.day, f.topic) for f in focus] == [
        (2, "Monday", "Laplace Transform"),
        (4, "Wednesday", "Paging"),
    ]


def test_cognitive_distribution_skips_buffer() -> None:
    schedule = {
        "Monday": [slot("Math", "Laplace Transform", hours=2), buffer_slot()],
        "Tuesday": [slot("OS", "Revision: Threads", kind="revision").model_copy(update={"cognitive_load": "low"})],
        "Sunday": [buffer_slot()],
    }
    distribution = cognitive_distribution(schedule)

    assert (distribution.high, distribution.medium, distribution.low) == (2, 0, 1)
    assert distribution.share("high") == pytest.approx(2 / 3)


def test_empty_week_has_no_cognitive_share() -> None:
    distribution = cognitive_distribution({})
    assert distribution.total == 0
    assert distribution.share("low") == 0.0
