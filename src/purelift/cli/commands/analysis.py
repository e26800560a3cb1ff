"""Analysis commands: volume, history, progress."""

import json
from typing import Annotated

import typer

from ...core.metrics import exercise_progress, group_by_day, personal_best
from .. import views
from ..app import DataDirOption, UserOption, app, get_tracker, resolve_exercise_or_exit


@app.command()
def volume(
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    insight: Annotated[
        bool,
        typer.Option("--insight", "-i", help="Ask the AI coach for a comment"),
    ] = False,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """
    Show this week's completed sets per muscle group against the goals.

    The week starts on Monday.
    """
    tracker = get_tracker(data_dir, user)
    volumes = tracker.weekly_volume()
    coach = tracker.coach_insight() if insight else None

    if json_out:
        payload = {
            "volumes": [
                {"muscle_group": v.muscle_group, "count": v.count, "goal": v.goal}
                for v in volumes
            ],
        }
        if coach is not None:
            payload["insight"] = coach
        print(json.dumps(payload, indent=2))
        return

    views.console.print()
    views.print_volume(volumes, coach)
    views.console.print()


@app.command()
def history(
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Number of training days to show"),
    ] = 10,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Show logged sets grouped by day, newest first."""
    tracker = get_tracker(data_dir, user)
    views.print_history(group_by_day(tracker.sets)[:limit], tracker.exercises)


@app.command()
def progress(
    exercise_ref: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise id or name")],
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Show the heaviest weight per session for the last 7 sessions."""
    tracker = get_tracker(data_dir, user)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)
    points = exercise_progress(tracker.sets, exercise.id)
    best = personal_best(tracker.sets, exercise.id)

    if json_out:
        print(json.dumps({
            "exercise_id": exercise.id,
            "name": exercise.name,
            "reference_weight": exercise.reference_weight,
            "points": [{"date": d.isoformat(), "weight": w} for d, w in points],
            "personal_best": (
                {"weight": best.weight, "reps": best.reps, "date": best.date} if best else None
            ),
        }, indent=2))
        return

    views.console.print()
    views.print_progress(points, exercise, best)
    views.console.print()
