"""Shared Typer app object, shared option types, and tracker utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..advisory.advisor import Advisor
from ..core.engine.config_loader import get_data_home, load_progression_rules
from ..io.gateway import StorageError
from ..io.serializers import ValidationError
from ..io.store import get_default_store
from ..tracker import Tracker
from . import views

# Shared --data-dir / --user options used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Data directory (default: $PURELIFT_HOME or ~/.purelift)"),
]
UserOption = Annotated[
    Optional[str],
    typer.Option("--user", "-u", help="User id (default: $PURELIFT_USER or login name)"),
]

app = typer.Typer(
    name="purelift",
    help="Gym tracker with progressive overload and weekly volume goals.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_tracker(data_dir: Path | None, user: str | None, seed: bool = True) -> Tracker:
    """
    Build a Tracker for the given data dir and user and load its data.

    Storage problems are printed and turned into exit code 1.
    """
    home = data_dir.expanduser() if data_dir else get_data_home()
    tracker = Tracker(
        get_default_store(home, user),
        advisor=Advisor.from_env(),
        rules=load_progression_rules(home),
    )
    try:
        tracker.load(seed=seed)
    except (StorageError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return tracker


def resolve_exercise_or_exit(tracker: Tracker, ref: str):
    """Exercise by id or name; prints an error and exits if unknown."""
    exercise = tracker.find_exercise(ref)
    if exercise is None:
        views.print_error(f"Unknown exercise: {ref}")
        views.print_info("Run 'purelift exercises' to list the catalog.")
        raise typer.Exit(1)
    return exercise
