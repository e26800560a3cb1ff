"""Routine commands: list, show, create, rename, delete, edit exercises and targets, generate."""

from typing import Annotated, NoReturn, Optional

import typer

from ...io.gateway import StorageError
from ...tracker import Tracker
from .. import views
from ..app import DataDirOption, UserOption, app, get_tracker, resolve_exercise_or_exit

RoutineArg = Annotated[str, typer.Argument(metavar="ROUTINE_ID", help="Routine id")]
ExerciseArg = Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise id or name")]


def _routine_or_exit(tracker: Tracker, routine_id: str):
    try:
        return tracker.routine(routine_id)
    except KeyError:
        views.print_error(f"Unknown routine: {routine_id}")
        views.print_info("Run 'purelift routines' to list them.")
        raise typer.Exit(1)


def _fail(e: Exception) -> NoReturn:
    views.print_error(str(e))
    raise typer.Exit(1)


@app.command()
def routines(
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """List routines (* marks the active one)."""
    tracker = get_tracker(data_dir, user)
    views.print_routines(tracker.routines, tracker.active_routine_id)


@app.command("routine-show")
def routine_show(
    routine_id: RoutineArg,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Show a routine's exercises and targets."""
    tracker = get_tracker(data_dir, user)
    views.print_routine(_routine_or_exit(tracker, routine_id), tracker.exercises, tracker.rules)


@app.command("routine-create")
def routine_create(
    name: Annotated[str, typer.Argument(help="Routine name")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Create an empty routine."""
    tracker = get_tracker(data_dir, user)
    try:
        routine = tracker.create_routine(name)
    except (StorageError, ValueError) as e:
        _fail(e)
    views.print_success(f"Created routine '{routine.name}' (id: {routine.id})")


@app.command("routine-rename")
def routine_rename(
    routine_id: RoutineArg,
    name: Annotated[str, typer.Argument(help="New name")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Rename a routine."""
    tracker = get_tracker(data_dir, user)
    _routine_or_exit(tracker, routine_id)
    try:
        routine = tracker.rename_routine(routine_id, name)
    except (StorageError, ValueError) as e:
        _fail(e)
    views.print_success(f"Renamed to '{routine.name}'")


@app.command("routine-delete")
def routine_delete(
    routine_id: RoutineArg,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation"),
    ] = False,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Delete a routine. Exercises and history are kept."""
    tracker = get_tracker(data_dir, user)
    routine = _routine_or_exit(tracker, routine_id)

    if not force and not views.confirm_action(f"Delete routine '{routine.name}'?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        tracker.delete_routine(routine_id)
    except StorageError as e:
        _fail(e)
    views.print_success(f"Deleted routine '{routine.name}'")


@app.command("routine-add")
def routine_add(
    routine_id: RoutineArg,
    exercise_ref: ExerciseArg,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Append a catalog exercise to a routine (default target 3x10)."""
    tracker = get_tracker(data_dir, user)
    routine = _routine_or_exit(tracker, routine_id)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)

    if exercise.id in routine.exercise_ids:
        views.print_info(f"{exercise.name} is already in '{routine.name}'")
        return
    try:
        tracker.add_to_routine(routine_id, exercise.id)
    except StorageError as e:
        _fail(e)
    views.print_success(f"Added {exercise.name} to '{routine.name}'")


@app.command("routine-remove")
def routine_remove(
    routine_id: RoutineArg,
    exercise_ref: ExerciseArg,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Remove an exercise from a routine."""
    tracker = get_tracker(data_dir, user)
    routine = _routine_or_exit(tracker, routine_id)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)

    if exercise.id not in routine.exercise_ids:
        views.print_info(f"{exercise.name} is not in '{routine.name}'")
        return
    try:
        tracker.remove_from_routine(routine_id, exercise.id)
    except StorageError as e:
        _fail(e)
    views.print_success(f"Removed {exercise.name} from '{routine.name}'")


@app.command("routine-target")
def routine_target(
    routine_id: RoutineArg,
    exercise_ref: ExerciseArg,
    sets: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", min=0, help="Number of sets"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", "-r", min=0, help="Target reps per set"),
    ] = None,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Set the sets x reps target for one exercise in a routine."""
    if sets is None and reps is None:
        views.print_error("Give --sets and/or --reps")
        raise typer.Exit(1)

    tracker = get_tracker(data_dir, user)
    _routine_or_exit(tracker, routine_id)
    exercise = resolve_exercise_or_exit(tracker, exercise_ref)
    try:
        routine = tracker.set_target(routine_id, exercise.id, sets, reps)
    except (StorageError, ValueError) as e:
        _fail(e)
    views.print_success(f"{exercise.name}: {routine.targets[exercise.id]} in '{routine.name}'")


@app.command("routine-generate")
def routine_generate(
    prompt: Annotated[str, typer.Argument(help="What you want, e.g. 'upper body hypertrophy, 45 min'")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Generate a routine with the AI coach and save it."""
    tracker = get_tracker(data_dir, user)
    if not tracker.advisor.online:
        views.print_error("Routine generation needs GEMINI_API_KEY (or GOOGLE_API_KEY).")
        raise typer.Exit(1)

    try:
        routine = tracker.generate_routine(prompt)
    except (StorageError, ValueError) as e:
        _fail(e)
    if routine is None:
        views.print_error("The AI coach could not generate a routine. Try again later.")
        raise typer.Exit(1)

    views.print_success(f"Created routine '{routine.name}' (id: {routine.id})")
    views.print_routine(routine, tracker.exercises, tracker.rules)
