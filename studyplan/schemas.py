from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional
from datetime import date

CognitiveLoad = Literal["low", "medium", "high"]
SessionType = Literal["concept-learning", "revision", "practice", "buffer"]
SlotPriority = Literal["high", "medium", "low"]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def split_areas(value) -> List[str]:
    """Normalize a comma-separated string or list of areas into trimmed, non-empty entries"""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(area).strip() for area in value if str(area).strip()]


class InputModel(BaseModel):
    """Base for caller-supplied records; accepts snake_case or camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Subject(InputModel):
    """A subject as entered by the learner"""
    name: str
    credits: int = Field(ge=0)
    confidence: int = Field(ge=1, le=5)
    strong_areas: List[str] = Field(default_factory=list)
    weak_areas: List[str] = Field(default_factory=list)
    cognitive_load: CognitiveLoad = "medium"
    priority: Optional[int] = Field(default=None, ge=1)

    @field_validator("strong_areas", "weak_areas", mode="before")
    @classmethod
    def _split_areas(cls, value):
        return split_areas(value)


class FocusTopic(BaseModel):
    """Ordered study topic derived from weak and strong areas"""
    topic: str
    priority: Literal["high", "low"]
    type: Literal["concept-learning", "revision"]
    order: int


class WeightedSubject(Subject):
    """Subject augmented with its priority weight and hour allocation for one planning run"""
    weight: int = Field(ge=0)
    weekly_hours: int = 0
    daily_hours: int = 0
    hours_allocated: int = 0
    focus_topics: List[FocusTopic] = Field(default_factory=list)

    # Provenance fields, display only
    weak_area_count: int = 0
    confidence_factor: int = 0
    cognitive_multiplier: float = 1.0


class StudySlot(BaseModel):
    """A single scheduled session within a day"""
    model_config = ConfigDict(frozen=True)

    subject: str
    topic: str
    hours: int = Field(ge=1)
    time: str
    cognitive_load: CognitiveLoad
    type: SessionType
    priority: SlotPriority

    @computed_field
    @property
    def duration(self) -> str:
        return f"{self.hours} hour{'s' if self.hours > 1 else ''}"


WeekSchedule = Dict[str, List[StudySlot]]


class StudentInput(InputModel):
    """Everything the learner provides to generate a plan"""
    name: Optional[str] = None
    subjects: List[Subject] = Field(default_factory=list)
    weekday_hours: int = Field(ge=0)
    weekend_hours: int = Field(ge=0)
    preferred_time: str = "evening"  # morning, afternoon, evening, night
    target_date: date
    exam_date: Optional[date] = None

    @field_validator("exam_date", mode="before")
    @classmethod
    def _blank_exam_date(cls, value):
        # Forms submit an empty string when no exam is set
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("subjects")
    @classmethod
    def _unique_subject_names(cls, subjects):
        # Hours are tallied per subject name
        names = [subject.name for subject in subjects]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate subject names: {', '.join(duplicates)}")
        return subjects


class ConfidenceUpdate(InputModel):
    """Learner's revised self-rating for one subject"""
    subject: str
    new_confidence: int = Field(ge=1, le=5)


class PriorityFocusItem(BaseModel):
    subject: str
    topic: str
    reason: str
    urgency: Literal["high", "medium"]


class PrerequisiteCheck(BaseModel):
    check: str
    status: Literal["complete", "pending"]
    icon: str


class AdaptationSuggestion(BaseModel):
    suggestion: str
    condition: str
    impact: Literal["High", "Medium"]


class TodoItem(BaseModel):
    task: str
    duration: str
    priority: SlotPriority
    time: str


class WeeklyGoal(BaseModel):
    subject: str
    goal: str
    target: str
    status: Literal["In Progress", "On Track"]


class Insights(BaseModel):
    """Human-readable summaries derived from a generated week"""
    priority_focus: List[PriorityFocusItem] = Field(default_factory=list)
    prerequisites: List[PrerequisiteCheck] = Field(default_factory=list)
    adaptations: List[AdaptationSuggestion] = Field(default_factory=list)
    todays_todo: List[TodoItem] = Field(default_factory=list)
    weekly_goals: List[WeeklyGoal] = Field(default_factory=list)


class ConfidenceImprovement(BaseModel):
    subject: str
    current: int
    target: int
    improvement: int


class EfficiencyGains(BaseModel):
    reduction_in_cramming: str
    better_retention: str
    stress_reduction: str
    time_saved: str


class Timeline(BaseModel):
    weak_areas_completion: str
    full_revision_start: str
    exam_preparation: str
    completion: str


class Outcomes(BaseModel):
    """Projected results of following the plan"""
    total_hours: int
    total_weeks: int
    confidence_improvements: List[ConfidenceImprovement] = Field(default_factory=list)
    efficiency_gains: EfficiencyGains
    timeline: Timeline


class DayFocus(BaseModel):
    """Main session for one of the upcoming seven days"""
    day_number: int
    day: str
    subject: str
    topic: str
    type: SessionType
    duration: str
    cognitive_load: CognitiveLoad


class CognitiveDistribution(BaseModel):
    """Session hours of a week per cognitive load, buffer excluded"""
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low

    def share(self, load: CognitiveLoad) -> float:
        return getattr(self, load) / self.total if self.total else 0.0


class Plan(BaseModel):
    """Composite output of one planning call"""
    weekly_schedule: WeekSchedule
    insights: Insights
    outcomes: Outcomes
    weighted_subjects: List[WeightedSubject]
    total_weeks: int
    total_hours: int
    current_week: int = 1
    exam_pressure: float = 0.0
    next_seven_days: List[DayFocus] = Field(default_factory=list)
    cognitive_distribution: CognitiveDistribution = Field(default_factory=CognitiveDistribution)
