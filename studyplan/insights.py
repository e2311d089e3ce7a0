"""Insights and projected outcomes derived from a generated week.

Nothing here makes scheduling decisions; every function reads the
weighted subjects, the schedule and the learner's input.
"""

from datetime import date, timedelta
from typing import List, Optional

from studyplan.allocator import BUFFER_SUBJECT
from studyplan.schemas import (
    WEEKDAYS,
    AdaptationSuggestion,
    CognitiveDistribution,
    ConfidenceImprovement,
    DayFocus,
    EfficiencyGains,
    Insights,
    Outcomes,
    PrerequisiteCheck,
    PriorityFocusItem,
    StudentInput,
    Timeline,
    TodoItem,
    WeekSchedule,
    WeeklyGoal,
    WeightedSubject,
)
from studyplan.weights import round_half_up


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def priority_focus(weighted_subjects: List[WeightedSubject]) -> List[PriorityFocusItem]:
    """First weak area of each low-confidence subject, heaviest subject first"""
    items = []
    for subject in sorted(weighted_subjects, key=lambda s: s.weight, reverse=True):
        if subject.confidence > 3 or not subject.weak_areas:
            continue
        items.append(PriorityFocusItem(
            subject=subject.name,
            topic=subject.weak_areas[0],
            reason=f"Low confidence ({subject.confidence}/5)",
            urgency="high" if subject.confidence <= 2 else "medium",
        ))
    return items


def _find_subject(weighted_subjects: List[WeightedSubject], fragment: str) -> Optional[WeightedSubject]:
    return next((s for s in weighted_subjects if fragment in s.name.lower()), None)


def prerequisite_checks(weighted_subjects: List[WeightedSubject]) -> List[PrerequisiteCheck]:
    checks = []

    data_structures = _find_subject(weighted_subjects, "data structure")
    if data_structures:
        ready = data_structures.confidence >= 3
        checks.append(PrerequisiteCheck(
            check="Arrays/Linked Lists → Essential for Trees/Graphs",
            status="complete" if ready else "pending",
            icon="check" if ready else "exclamation",
        ))

    operating_systems = _find_subject(weighted_subjects, "operating system")
    if operating_systems:
        struggling = any("deadlock" in area.lower() for area in operating_systems.weak_areas)
        checks.append(PrerequisiteCheck(
            check="Processes/Threads → Foundation for Deadlocks",
            status="pending" if struggling else "complete",
            icon="warning" if struggling else "check",
        ))

    if _find_subject(weighted_subjects, "math"):
        checks.append(PrerequisiteCheck(
            check="Differential Equations → Required for Laplace Transform",
            status="complete",
            icon="check",
        ))

    checks.append(PrerequisiteCheck(
        check="Basic concepts clear before advanced topics",
        status="pending",
        icon="clock",
    ))
    return checks


def adaptation_suggestions(
    weighted_subjects: List[WeightedSubject],
    preferred_time: str,
) -> List[AdaptationSuggestion]:
    suggestions = []

    for subject in weighted_subjects:
        if subject.confidence <= 2:
            suggestions.append(AdaptationSuggestion(
                suggestion=f"Increase {subject.name} time allocation by 30 minutes daily",
                condition=f"Confidence in {subject.name} is {subject.confidence}/5",
                impact="High",
            ))
        if subject.confidence >= 4:
            suggestions.append(AdaptationSuggestion(
                suggestion=f"Reduce {subject.name} focus to focus on weaker subjects",
                condition=f"Strong confidence ({subject.confidence}/5) in {subject.name}",
                impact="Medium",
            ))

    high_load = [s for s in weighted_subjects if s.cognitive_load == "high"]
    if len(high_load) > 1:
        suggestions.append(AdaptationSuggestion(
            suggestion="Schedule high-cognitive subjects on different days",
            condition="Multiple high-load subjects",
            impact="High",
        ))

    suggestions.append(AdaptationSuggestion(
        suggestion=f"Schedule {preferred_time} as primary study time for complex topics",
        condition=f"Preferred time: {preferred_time}",
        impact="Medium",
    ))
    return suggestions


def todays_todo(schedule: WeekSchedule, today: date) -> List[TodoItem]:
    return [
        TodoItem(
            task=f"Study {slot.topic} in {slot.subject}",
            duration=slot.duration,
            priority=slot.priority,
            time=slot.time,
        )
        for slot in schedule.get(weekday_name(today), [])
        if slot.type != "buffer"
    ]


def weekly_goals(weighted_subjects: List[WeightedSubject], current_week: int) -> List[WeeklyGoal]:
    return [
        WeeklyGoal(
            subject=subject.name,
            goal=f"Complete {subject.weak_areas[0]} this week",
            target=f"Week {current_week}",
            status="In Progress" if subject.confidence <= 2 else "On Track",
        )
        for subject in weighted_subjects
        if subject.weak_areas
    ]


def generate_insights(
    weighted_subjects: List[WeightedSubject],
    schedule: WeekSchedule,
    student_input: StudentInput,
    current_week: int = 1,
    today: Optional[date] = None,
) -> Insights:
    """
    Summarize a generated week for the learner.

    Args:
        weighted_subjects: Subjects with weights and hours for this run
        schedule: The generated Monday-Sunday schedule
        student_input: Raw learner input (for the preferred time band)
        current_week: Week being shown, used as the goal target
        today: Reference date for the to-do list (defaults to today)

    Returns:
        Insights bundle
    """
    today = today or date.today()
    return Insights(
        priority_focus=priority_focus(weighted_subjects),
        prerequisites=prerequisite_checks(weighted_subjects),
        adaptations=adaptation_suggestions(weighted_subjects, student_input.preferred_time),
        todays_todo=todays_todo(schedule, today),
        weekly_goals=weekly_goals(weighted_subjects, current_week),
    )


def generate_outcomes(
    weighted_subjects: List[WeightedSubject],
    total_hours: int,
    total_weeks: int,
) -> Outcomes:
    """Project confidence gains and milestones over the plan horizon"""
    improvements = []
    for subject in weighted_subjects:
        target = min(5, subject.confidence + total_weeks // 4 + 1)
        improvements.append(ConfidenceImprovement(
            subject=subject.name,
            current=subject.confidence,
            target=target,
            improvement=target - subject.confidence,
        ))

    efficiency_gains = EfficiencyGains(
        reduction_in_cramming="70% reduction in last-minute workload",
        better_retention="Estimated 45% improvement in long-term retention",
        stress_reduction="Balanced schedule reduces burnout risk",
        time_saved=f"{round_half_up(total_hours * 0.2)} hours saved per week",
    )

    # Exam prep window is capped at the last two weeks
    timeline = Timeline(
        weak_areas_completion=f"Week {int(total_weeks * 0.6)}",
        full_revision_start=f"Week {int(total_weeks * 0.8)}",
        exam_preparation=f"Last {min(2, int(total_weeks * 0.15))} weeks",
        completion=f"By Week {total_weeks}",
    )

    return Outcomes(
        total_hours=total_hours,
        total_weeks=total_weeks,
        confidence_improvements=improvements,
        efficiency_gains=efficiency_gains,
        timeline=timeline,
    )


def next_seven_days(schedule: WeekSchedule, today: Optional[date] = None) -> List[DayFocus]:
    """Main (first non-buffer) session for each of the next seven days, starting today"""
    today = today or date.today()
    focus = []
    for offset in range(7):
        day = weekday_name(today + timedelta(days=offset))
        main = next((slot for slot in schedule.get(day, []) if slot.subject != BUFFER_SUBJECT), None)
        if main:
            focus.append(DayFocus(
                day_number=offset + 1,
                day=day,
                subject=main.subject,
                topic=main.topic,
                type=main.type,
                duration=main.duration,
                cognitive_load=main.cognitive_load,
            ))
    return focus


def cognitive_distribution(schedule: WeekSchedule) -> CognitiveDistribution:
    """Total session hours of the week per cognitive load; buffer time is not study"""
    hours = {"high": 0, "medium": 0, "low": 0}
    for slots in schedule.values():
        for slot in slots:
            if slot.subject != BUFFER_SUBJECT:
                hours[slot.cognitive_load] += slot.hours
    return CognitiveDistribution(**hours)
