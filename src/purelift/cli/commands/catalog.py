"""Catalog commands: exercises, add-exercise, tips, alternatives."""

from typing import Annotated, Optional

import typer

from ...io.gateway import StorageError
from .. import views
from ..app import DataDirOption, UserOption, app, get_tracker, resolve_exercise_or_exit


@app.command()
def exercises(
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """List the exercise catalog."""
    tracker = get_tracker(data_dir, user)
    views.print_exercises(tracker.exercises)


@app.command("add-exercise")
def add_exercise(
    text: Annotated[str, typer.Argument(help="Exercise name or description, e.g. 'incline db press'")],
    routine_id: Annotated[
        Optional[str],
        typer.Option("--routine", "-r", help="Also add it to this routine"),
    ] = None,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """
    Classify free text and add it to the catalog.

    An exercise with the same name (case-insensitive) is reused.
    """
    tracker = get_tracker(data_dir, user)
    known = {ex.id for ex in tracker.exercises}
    if routine_id is not None and routine_id not in {r.id for r in tracker.routines}:
        views.print_error(f"Unknown routine: {routine_id}")
        raise typer.Exit(1)

    try:
        exercise = tracker.add_custom_exercise(text, routine_id)
    except StorageError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if exercise.id in known:
        views.print_info(f"Already in catalog: {exercise.name} ({exercise.muscle_group})")
    else:
        views.print_success(
            f"Added {exercise.name} ({exercise.muscle_group}) at {exercise.reference_weight:g} kg"
        )
    if routine_id is not None:
        views.print_info(f"In routine: {tracker.routine(routine_id).name}")


@app.command()
def tips(
    exercise_ref: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise id or name")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Show form tips for an exercise."""
    tracker = get_tracker(data_dir, user)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)
    views.print_tips(exercise, tracker.form_tips(exercise.id))


@app.command()
def alternatives(
    exercise_ref: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise id or name")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Suggest replacements targeting the same muscle group."""
    tracker = get_tracker(data_dir, user)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)
    views.print_alternatives(exercise, tracker.alternatives(exercise.id))
