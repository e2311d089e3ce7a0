import typer
from rich.console import Console
from rich.table import Table
from typing import Optional
from pathlib import Path
from datetime import date
import json

from pydantic import ValidationError

from studyplan.config import settings
from studyplan.logger import setup_logger
from studyplan.database import SessionLocal, init_db
from studyplan.crud import (
    SUBJECTS_KEY, SCHEDULE_KEY, SESSION_KEY,
    save_snapshot, load_snapshot, delete_snapshots
)
from studyplan.schemas import WEEKDAYS, ConfidenceUpdate, Plan, StudentInput, Subject
from studyplan.orchestrator import PlanSession
from studyplan.explainer import ExplainerError, get_explainer, study_context
from studyplan.sample_data import sample_student_input

app = typer.Typer(help="Study Planner CLI - weighted weekly study schedules for engineering students")
console = Console()

TYPE_LABELS = {
    "concept-learning": "Concept Learning",
    "revision": "Revision",
    "practice": "Practice",
    "buffer": "Buffer",
}

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """Configure logging before any command runs"""
    setup_logger(level="DEBUG" if verbose else settings.log_level, log_file=settings.log_file)

def _save_session(db, session: PlanSession):
    """Snapshot the raw subjects, the current plan and the session state"""
    save_snapshot(db, SUBJECTS_KEY, [s.model_dump(mode="json") for s in session.student_input.subjects])
    if session.plan is not None:
        save_snapshot(db, SCHEDULE_KEY, session.plan.model_dump(mode="json"))
    save_snapshot(db, SESSION_KEY, session.snapshot())

def _load_session(db) -> Optional[PlanSession]:
    data = load_snapshot(db, SESSION_KEY)
    if not data:
        console.print("[yellow]No plan found. Run generate-plan first.[/yellow]")
        return None
    return PlanSession.from_snapshot(data)

def _render_schedule(plan: Plan):
    console.print(f"\n[bold]Week {plan.current_week} of {plan.total_weeks}[/bold]"
                  f"  (exam pressure {plan.exam_pressure:.0%})\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Day", style="cyan", width=10)
    table.add_column("Subject", style="green")
    table.add_column("Topic", style="yellow")
    table.add_column("Duration", style="blue", justify="right")
    table.add_column("Time")
    table.add_column("Type")
    table.add_column("Load")

    for day in WEEKDAYS:
        slots = plan.weekly_schedule.get(day, [])
        if not slots:
            table.add_row(day, "[dim]-[/dim]", "", "", "", "", "")
        for i, slot in enumerate(slots):
            table.add_row(
                day if i == 0 else "",
                slot.subject,
                slot.topic,
                slot.duration,
                slot.time,
                TYPE_LABELS.get(slot.type, slot.type),
                slot.cognitive_load
            )
        table.add_section()

    console.print(table)

def _render_breakdown(plan: Plan):
    total_weight = sum(s.weight for s in plan.weighted_subjects) or 1

    table = Table(title="Subject Breakdown", show_header=True, header_style="bold magenta")
    table.add_column("Subject", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Hours/Week", justify="right")
    table.add_column("Hours/Day", justify="right")
    table.add_column("Scheduled", justify="right")

    for s in plan.weighted_subjects:
        table.add_row(
            s.name,
            str(s.weight),
            f"{s.weight / total_weight:.0%}",
            f"{s.weekly_hours}h",
            f"{s.daily_hours}h",
            f"{s.hours_allocated}h"
        )

    console.print(table)

    distribution = plan.cognitive_distribution
    console.print("[bold]Cognitive Load:[/bold] " + " | ".join(
        f"{load.title()} Focus {getattr(distribution, load)}h ({distribution.share(load):.0%})"
        for load in ("high", "medium", "low")
    ))

def _render_insights(plan: Plan):
    insights = plan.insights

    if insights.priority_focus:
        console.print("\n[bold]Priority Focus:[/bold]")
        for item in insights.priority_focus:
            color = "red" if item.urgency == "high" else "yellow"
            console.print(f"  [{color}]●[/{color}] {item.subject}: {item.topic} - {item.reason}")

    console.print("\n[bold]Prerequisite Checks:[/bold]")
    for check in insights.prerequisites:
        mark = "[green]✓[/green]" if check.status == "complete" else "[yellow]…[/yellow]"
        console.print(f"  {mark} {check.check}")

    console.print("\n[bold]Adaptation Suggestions:[/bold]")
    for item in insights.adaptations:
        console.print(f"  - {item.suggestion} [dim]({item.condition}, impact: {item.impact})[/dim]")

    console.print("\n[bold]Today's To-Do:[/bold]")
    if not insights.todays_todo:
        console.print("  [dim]Nothing scheduled today.[/dim]")
    for todo in insights.todays_todo:
        console.print(f"  - {todo.task} ({todo.duration}, {todo.time}, {todo.priority} priority)")

    if insights.weekly_goals:
        console.print("\n[bold]Weekly Goals:[/bold]")
        for goal in insights.weekly_goals:
            console.print(f"  - {goal.subject}: {goal.goal} [{goal.status}]")

    if plan.next_seven_days:
        console.print("\n[bold]Next 7 Days:[/bold]")
        for focus in plan.next_seven_days:
            console.print(f"  Day {focus.day_number} ({focus.day}): {focus.topic} ({focus.subject}) - "
                          f"{TYPE_LABELS.get(focus.type, focus.type)}, {focus.duration}, {focus.cognitive_load} focus")

def _render_outcomes(plan: Plan):
    outcomes = plan.outcomes

    console.print(f"\n[bold]Expected Outcomes:[/bold] {outcomes.total_hours}h over {outcomes.total_weeks} weeks")
    for item in outcomes.confidence_improvements:
        console.print(f"  {item.subject}: {item.current}/5 → {item.target}/5")

    gains = outcomes.efficiency_gains
    console.print(f"  {gains.reduction_in_cramming}; {gains.better_retention}; {gains.time_saved}")

    timeline = outcomes.timeline
    console.print(f"  Weak areas done: {timeline.weak_areas_completion} | Full revision: {timeline.full_revision_start} | "
                  f"Exam prep: {timeline.exam_preparation} | {timeline.completion}\n")

def _render_plan(plan: Plan):
    _render_schedule(plan)
    _render_breakdown(plan)
    _render_insights(plan)
    _render_outcomes(plan)

@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")

@app.command()
def reset_db():
    """Delete all saved plans and reinitialize database (WARNING: irreversible!)"""
    confirm = typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?")
    if not confirm:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    from studyplan.database import engine, Base
    import studyplan.models  # noqa: F401
    console.print("[yellow]Dropping all tables...[/yellow]")
    Base.metadata.drop_all(bind=engine)
    console.print("[yellow]Recreating tables...[/yellow]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓[/green] Database reset complete! All data deleted.")

@app.command()
def sample_input(out: Path = typer.Option(Path("student.json"), help="Where to write the sample input")):
    """Write a sample student input file to edit and feed to generate-plan"""
    data = sample_student_input().model_dump(mode="json", by_alias=True)
    out.write_text(json.dumps(data, indent=2))
    console.print(f"[green]✓[/green] Sample input written to {out}")

@app.command()
def generate_plan(
    input_file: Path = typer.Option(..., "--input", prompt="Student input file (.json)"),
    week: int = typer.Option(1, help="Week of the plan to show"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible session types")
):
    """Generate a study plan from a student input file"""
    try:
        student_input = StudentInput.model_validate_json(input_file.read_text())
    except FileNotFoundError:
        console.print(f"[red]✗[/red] File not found: {input_file}")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid student input:\n{e}")
        raise typer.Exit(1)

    if not student_input.subjects:
        console.print("[red]✗[/red] Please add at least one subject")
        raise typer.Exit(1)

    init_db()
    db = SessionLocal()
    try:
        session = PlanSession(student_input, current_week=week, seed=seed)
        plan = session.generate()
        _save_session(db, session)

        console.print("\n[green]✓[/green] [bold]Study Plan Generated![/bold]")
        _render_plan(plan)
    finally:
        db.close()

@app.command()
def view_plan():
    """View the latest generated plan"""
    init_db()
    db = SessionLocal()
    try:
        data = load_snapshot(db, SCHEDULE_KEY)
        if not data:
            console.print("[yellow]No plan found. Run generate-plan first.[/yellow]")
            return
        _render_plan(Plan.model_validate(data))
    finally:
        db.close()

def _navigate(delta: int):
    init_db()
    db = SessionLocal()
    try:
        session = _load_session(db)
        if session is None:
            return
        session.generate()
        plan = session.change_week(delta)
        _save_session(db, session)
        _render_schedule(plan)
        _render_insights(plan)
    finally:
        db.close()

@app.command()
def next_week():
    """Show the next week of the plan"""
    _navigate(1)

@app.command()
def prev_week():
    """Show the previous week of the plan"""
    _navigate(-1)

@app.command()
def adapt(
    subject: str = typer.Option(..., prompt="Subject name"),
    confidence: int = typer.Option(..., prompt="New confidence (1-5)")
):
    """Record a new confidence rating and decay that subject's weight"""
    try:
        update = ConfidenceUpdate(subject=subject, new_confidence=confidence)
    except ValidationError:
        console.print("[red]✗[/red] Confidence must be between 1 and 5")
        raise typer.Exit(1)

    init_db()
    db = SessionLocal()
    try:
        session = _load_session(db)
        if session is None:
            return
        session.generate()
        before = {s.name: s.weight for s in session.weighted_subjects}
        subjects = session.adapt_schedule([update])
        save_snapshot(db, SESSION_KEY, session.snapshot())

        match = next((s for s in subjects if s.name == subject), None)
        if match is None:
            console.print(f"[red]✗[/red] Subject '{subject}' not found in the current plan")
            return
        console.print(f"[green]✓[/green] {match.name}: confidence {match.confidence}/5, "
                      f"weight {before[match.name]} → {match.weight}")
        console.print("[dim]Run generate-plan or next-week to see the adjusted schedule.[/dim]")
    finally:
        db.close()

@app.command()
def explain(
    topic: str = typer.Option(..., prompt="Topic"),
    subject: str = typer.Option(..., prompt="Subject")
):
    """Ask the AI assistant to explain a topic"""
    init_db()
    db = SessionLocal()
    try:
        subjects = [Subject.model_validate(s) for s in (load_snapshot(db, SUBJECTS_KEY) or [])]
        schedule_data = load_snapshot(db, SCHEDULE_KEY)
        schedule = Plan.model_validate(schedule_data).weekly_schedule if schedule_data else None
    finally:
        db.close()

    console.print(f"[yellow]Asking {settings.ai_provider} about {topic}...[/yellow]")
    try:
        explainer = get_explainer()
        answer = explainer.explain_topic(topic, subject, study_context(subjects, schedule, date.today()))
    except ExplainerError as e:
        console.print(f"[red]✗[/red] {e.user_message}")
        raise typer.Exit(1)

    console.print(f"\n[bold]{topic} ({subject})[/bold]\n")
    console.print(answer)

@app.command()
def export(out: Path = typer.Option(Path("study-schedule.json"), help="Output JSON file")):
    """Download the latest plan as JSON"""
    init_db()
    db = SessionLocal()
    try:
        data = load_snapshot(db, SCHEDULE_KEY)
        if not data:
            console.print("[yellow]Please generate a schedule first.[/yellow]")
            return
        out.write_text(json.dumps(data, indent=2, ensure_ascii=False))
        console.print(f"[green]✓[/green] Plan exported to {out}")
    finally:
        db.close()

@app.command()
def clear():
    """Remove saved subjects, plan and session"""
    init_db()
    db = SessionLocal()
    try:
        deleted = delete_snapshots(db)
        console.print(f"[green]✓[/green] Removed {deleted} saved snapshot(s)")
    finally:
        db.close()

if __name__ == "__main__":
    app()
