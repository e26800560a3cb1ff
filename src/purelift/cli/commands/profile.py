"""Profile commands: init, settings, set-goal, set-rest."""

from typing import Annotated

import typer

from ...core.models import MUSCLE_GROUPS
from ...io.gateway import StorageError
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, UserOption, app, get_tracker


def _match_group(group: str) -> str:
    for g in MUSCLE_GROUPS:
        if g.lower() == group.strip().lower():
            return g
    views.print_error(f"Unknown muscle group: {group}. Choose from {', '.join(MUSCLE_GROUPS)}")
    raise typer.Exit(1)


@app.command()
def init(
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """
    Set up the user: starter catalog, routines and default settings.

    Safe to run again; existing data is never overwritten.
    """
    tracker = get_tracker(data_dir, user, seed=False)
    had_data = bool(tracker.exercises or tracker.routines)

    try:
        tracker.gateway.seed_defaults()
        if tracker.gateway.load_settings() is None:
            tracker.update_settings()
        tracker.load(seed=False)
    except (StorageError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if had_data:
        views.print_info("Existing data kept; nothing was overwritten.")
    else:
        views.print_success(
            f"Seeded {len(tracker.exercises)} exercises and {len(tracker.routines)} routines."
        )
    views.print_routines(tracker.routines, tracker.active_routine_id)


@app.command()
def settings(
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Show weekly volume goals and rest time."""
    tracker = get_tracker(data_dir, user)
    views.print_settings(tracker.settings, tracker.rules)


@app.command("set-goal")
def set_goal(
    group: Annotated[str, typer.Argument(help=f"Muscle group: {', '.join(MUSCLE_GROUPS)}")],
    sets: Annotated[int, typer.Argument(min=0, help="Weekly set goal")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Set the weekly set goal for one muscle group."""
    muscle_group = _match_group(group)
    tracker = get_tracker(data_dir, user)
    try:
        tracker.set_volume_goal(muscle_group, sets)
    except (StorageError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Weekly goal for {muscle_group}: {sets} sets")


@app.command("set-rest")
def set_rest(
    seconds: Annotated[int, typer.Argument(min=0, help="Default rest between sets")],
    data_dir: DataDirOption = None,
    user: UserOption = None,
) -> None:
    """Set the default rest time shown after each completed set."""
    tracker = get_tracker(data_dir, user)
    try:
        tracker.update_settings(default_rest_time=seconds)
    except (StorageError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Default rest: {seconds} s")
