"""
CLI entry point using Typer.

Provides commands for the gym tracker:
- init: Seed the starter catalog and default settings
- workout: Run a live workout from a routine
- volume: Weekly sets per muscle group against goals
- history / progress: Logged sets and weight progress
- routines / routine-*: Manage routines
- exercises / add-exercise / tips / alternatives: Exercise catalog
- settings / set-goal / set-rest: Preferences
"""

import typer

from . import views
from .app import app
from .commands import analysis, catalog, profile, routines, workout  # noqa: F401  (register commands)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    PureLift gym tracker. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return  # a sub-command handles it

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]purelift[/bold cyan]: progressive overload gym tracker")
    views.console.print()

    menu = {
        "1": ("workout",    "Start workout (active routine)"),
        "2": ("volume",     "Weekly volume"),
        "3": ("history",    "Training history"),
        "4": ("routines",   "Routines"),
        "5": ("exercises",  "Exercise catalog"),
        "6": ("settings",   "Settings"),
        "i": ("init",       "Setup starter catalog"),
        "0": ("quit",       "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    cmd_map = {k: v[0] for k, v in menu.items()}
    chosen = cmd_map.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    # Invoke the chosen sub-command via typer
    if chosen == "workout":
        ctx.invoke(workout.workout)
    elif chosen == "volume":
        ctx.invoke(analysis.volume, insight=True)
    elif chosen == "history":
        ctx.invoke(analysis.history)
    elif chosen == "routines":
        ctx.invoke(routines.routines)
    elif chosen == "exercises":
        ctx.invoke(catalog.exercises)
    elif chosen == "settings":
        ctx.invoke(profile.settings)
    elif chosen == "init":
        ctx.invoke(profile.init)


if __name__ == "__main__":
    app()
