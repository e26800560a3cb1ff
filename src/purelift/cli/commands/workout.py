"""Live workout command: an interactive session loop."""

import math
from typing import Annotated, Optional

import typer

from ...core.models import SetLog
from ...io.gateway import StorageError
from ...io.serializers import ValidationError
from ...tracker import FinishReport, Tracker
from .. import views
from ..app import DataDirOption, UserOption, app, get_tracker

WORKOUT_HELP = """\
  done N        toggle set N completed
  w N KG        set weight of set N
  r N REPS      set reps of set N
  add TEXT      add an exercise (3x10) to this session
  swap N        replace the exercise of set N
  tips N        form tips for the exercise of set N
  show          redraw the session
  finish        save and apply progressive overload
  quit          abandon (nothing is saved)"""


def _to_number(raw: str) -> float:
    """Parse user input; anything unparseable or non-finite counts as 0."""
    try:
        value = float(raw.replace(",", "."))
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _set_at(tracker: Tracker, raw: str) -> SetLog | None:
    session = tracker.session
    try:
        n = int(raw)
    except ValueError:
        n = 0
    if session is None or not 1 <= n <= len(session):
        views.print_error(f"No set #{raw}")
        return None
    return session.sets[n - 1]


def _swap(tracker: Tracker, s: SetLog) -> None:
    exercise = tracker.exercise(s.exercise_id)
    alternatives = tracker.alternatives(exercise.id)
    views.print_alternatives(exercise, alternatives)

    raw = views.console.input("Pick # or type a name (Enter to cancel): ").strip()
    if not raw:
        return
    if raw.isdigit() and 1 <= int(raw) <= len(alternatives):
        raw = alternatives[int(raw) - 1].name

    try:
        replacement = tracker.swap_exercise(exercise.id, raw)
    except (StorageError, ValidationError) as e:
        views.print_error(str(e))
        return
    views.print_success(f"Swapped {exercise.name} → {replacement.name}")


def _print_report(report: FinishReport) -> None:
    for ex in report.updated:
        views.print_info(f"{ex.name}: next session at {ex.reference_weight:g} kg")
    for failure in report.failures:
        views.print_warning(failure)
    if report.ok:
        views.print_success(f"Workout saved: {report.persisted} sets logged.")
    else:
        views.print_warning("Workout finished with errors; some data may not be saved.")


def run_session(tracker: Tracker) -> None:
    """
    Read-eval loop over the tracker's live session.

    Returns when the session is finished or abandoned.
    """
    session = tracker.session
    if session is None:
        views.print_error("No workout in progress")
        raise typer.Exit(1)
    views.print_session(session, tracker.exercises)
    views.console.print("[dim]Type 'help' for commands.[/dim]")

    while tracker.session is not None:
        try:
            line = views.console.input("[bold]workout>[/bold] ").strip()
        except (EOFError, KeyboardInterrupt):
            line = "quit"
        if not line:
            continue

        cmd, _, rest = line.partition(" ")
        cmd = cmd.lower()
        args = rest.split()

        if cmd in ("help", "?"):
            views.console.print(WORKOUT_HELP)
        elif cmd in ("show", "ls"):
            views.print_session(session, tracker.exercises)
        elif cmd == "done" and args:
            s = _set_at(tracker, args[0])
            if s is not None:
                session.toggle_complete(s.id)
                views.print_session(session, tracker.exercises)
        elif cmd in ("w", "r") and len(args) >= 2:
            s = _set_at(tracker, args[0])
            if s is not None:
                value = _to_number(args[1])
                if cmd == "w":
                    session.update_set(s.id, "weight", value)
                else:
                    session.update_set(s.id, "reps", int(value))
                views.print_session(session, tracker.exercises)
        elif cmd == "add" and rest.strip():
            try:
                exercise = tracker.add_to_session(rest.strip())
            except (StorageError, ValidationError) as e:
                views.print_error(str(e))
                continue
            views.print_success(f"Added {exercise.name} (3x10 at {exercise.reference_weight:g} kg)")
            views.print_session(session, tracker.exercises)
        elif cmd == "swap" and args:
            s = _set_at(tracker, args[0])
            if s is not None:
                _swap(tracker, s)
                views.print_session(session, tracker.exercises)
        elif cmd == "tips" and args:
            s = _set_at(tracker, args[0])
            if s is not None:
                views.print_tips(tracker.exercise(s.exercise_id), tracker.form_tips(s.exercise_id))
        elif cmd == "finish":
            if session.is_empty:
                views.print_warning("Nothing to save.")
                tracker.abandon_session()
                break
            _print_report(tracker.finish_session())
        elif cmd in ("quit", "exit", "q"):
            if session.completed_count() and not views.confirm_action("Abandon this workout?"):
                continue
            tracker.abandon_session()
            views.print_info("Workout abandoned. Nothing was saved.")
        else:
            views.print_error(f"Unknown command: {line}. Type 'help'.")


@app.command()
def workout(
    routine_id: Annotated[
        Optional[str],
        typer.Argument(metavar="[ROUTINE_ID]", help="Routine to run (default: active routine)"),
    ] = None,
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """
    Run a live workout.

    Sets are pre-filled from the routine at each exercise's reference
    weight.  On finish, weights progress (+2.5 kg) for exercises where
    every set hit its target, and deload (-10%) for skipped ones.
    """
    tracker = get_tracker(data_dir, user)
    rest = tracker.settings.default_rest_time
    tracker.on_set_completed(lambda s: views.rest_reminder(rest))

    try:
        tracker.start_session(routine_id)
    except KeyError:
        views.print_error(f"Unknown routine: {routine_id}")
        raise typer.Exit(1)

    if tracker.session is not None and tracker.session.routine_id is not None:
        views.console.print(f"[bold cyan]{tracker.routine(tracker.session.routine_id).name}[/bold cyan]")
    run_session(tracker)
