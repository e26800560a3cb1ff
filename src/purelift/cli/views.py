"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of catalog, routine, session and
history data.
"""

import time
from datetime import date
from typing import Callable

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from ..core.ascii_plot import create_progress_plot, create_weekly_volume_chart
from ..core.config import ProgressionRules
from ..core.metrics import session_volume_load
from ..core.models import (
    MUSCLE_GROUPS,
    Alternative,
    Exercise,
    Routine,
    SetLog,
    UserSettings,
    WeeklyVolume,
)
from ..core.planner import target_for
from ..core.session import WorkoutSession

console = Console()


def _exercise_name(exercises: dict[str, Exercise], exercise_id: str) -> str:
    ex = exercises.get(exercise_id)
    return ex.name if ex is not None else f"[dim]{exercise_id} (missing)[/dim]"


def _fmt_weight(kg: float) -> str:
    return f"{kg:g} kg" if kg else "BW"


def format_exercise_table(exercises: list[Exercise]) -> Table:
    """
    Create a Rich table of the exercise catalog, grouped by muscle group.

    Args:
        exercises: Catalog to display

    Returns:
        Rich Table object
    """
    table = Table(title="Exercise Catalog")

    table.add_column("Group", style="magenta")
    table.add_column("Exercise", style="cyan")
    table.add_column("Ref. weight", justify="right", style="bold")
    table.add_column("ID", style="dim")

    order = {g: i for i, g in enumerate(MUSCLE_GROUPS)}
    for ex in sorted(exercises, key=lambda e: (order.get(e.muscle_group, 99), e.name.lower())):
        table.add_row(ex.muscle_group, ex.name, _fmt_weight(ex.reference_weight), ex.id)

    return table


def print_exercises(exercises: list[Exercise]) -> None:
    if not exercises:
        console.print("[yellow]No exercises in the catalog yet.[/yellow]")
        return
    console.print(format_exercise_table(exercises))


def print_routines(routines: list[Routine], active_id: str | None) -> None:
    """Print routine list; the active routine is starred."""
    if not routines:
        console.print("[yellow]No routines yet.[/yellow]")
        return

    table = Table(title="Routines")
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Exercises", justify="right")

    for r in routines:
        table.add_row("*" if r.id == active_id else "", r.id, r.name, str(len(r.exercise_ids)))

    console.print(table)


def print_routine(
    routine: Routine,
    exercises: list[Exercise],
    rules: ProgressionRules | None = None,
) -> None:
    """Print one routine with each exercise's effective target."""
    catalog = {ex.id: ex for ex in exercises}

    table = Table(title=routine.name)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Group", style="magenta")
    table.add_column("Target", justify="right", style="bold")
    table.add_column("Start weight", justify="right")

    for i, exercise_id in enumerate(routine.exercise_ids, 1):
        ex = catalog.get(exercise_id)
        table.add_row(
            str(i),
            _exercise_name(catalog, exercise_id),
            ex.muscle_group if ex else "-",
            str(target_for(routine, exercise_id, rules)),
            _fmt_weight(ex.reference_weight) if ex else "-",
        )

    console.print(table)


def format_session_table(session: WorkoutSession, exercises: list[Exercise]) -> Table:
    """
    Create a Rich table of the live session.

    The first column is the row number used by the workout commands.
    """
    catalog = {ex.id: ex for ex in exercises}
    table = Table(title="Workout", show_lines=False)

    table.add_column("N", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Set", justify="right")
    table.add_column("Weight", justify="right", style="bold")
    table.add_column("Reps", justify="right")
    table.add_column("Target", justify="right", style="dim")
    table.add_column("Done", justify="center")

    previous = None
    for n, s in enumerate(session.sets, 1):
        name = _exercise_name(catalog, s.exercise_id) if s.exercise_id != previous else ""
        previous = s.exercise_id
        done = "[green]✓[/green]" if s.completed else "·"
        reps = str(s.reps) if s.meets_target else f"[yellow]{s.reps}[/yellow]"
        table.add_row(
            str(n),
            name,
            str(session.set_number(s.id)),
            f"{s.weight:g}",
            reps,
            str(s.target_reps),
            done,
        )

    return table


def print_session(session: WorkoutSession, exercises: list[Exercise]) -> None:
    if session.is_empty:
        console.print("[yellow]Session is empty. Use 'add <exercise>' to add one.[/yellow]")
        return
    console.print(format_session_table(session, exercises))
    console.print(f"[dim]{session.completed_count()}/{len(session)} sets completed[/dim]")


def print_volume(volumes: list[WeeklyVolume], insight: str | None = None) -> None:
    console.print(create_weekly_volume_chart(volumes))
    if insight:
        console.print()
        console.print(f"[bold]Coach:[/bold] {insight}")


def print_history(days: list[tuple[date, list[SetLog]]], exercises: list[Exercise]) -> None:
    """
    Print completed sets grouped per day, newest first.

    Args:
        days: Output of core.metrics.group_by_day
        exercises: Catalog for name lookup
    """
    if not days:
        console.print("[yellow]No sets recorded yet.[/yellow]")
        return

    catalog = {ex.id: ex for ex in exercises}
    table = Table(title="Training History")
    table.add_column("Date", style="cyan")
    table.add_column("Exercise")
    table.add_column("Sets", justify="right")
    table.add_column("Top set", justify="right", style="bold")
    table.add_column("Volume (kg)", justify="right")

    for day, sets in days:
        by_exercise: dict[str, list[SetLog]] = {}
        for s in sets:
            by_exercise.setdefault(s.exercise_id, []).append(s)
        first = True
        for exercise_id, ex_sets in by_exercise.items():
            top = max(ex_sets, key=lambda s: (s.weight, s.reps))
            table.add_row(
                day.isoformat() if first else "",
                _exercise_name(catalog, exercise_id),
                str(len(ex_sets)),
                f"{top.weight:g} x {top.reps}",
                f"{session_volume_load(ex_sets):g}",
            )
            first = False

    console.print(table)


def print_progress(
    points: list[tuple[date, float]],
    exercise: Exercise,
    best: SetLog | None,
) -> None:
    console.print(create_progress_plot(points, exercise.name))
    if best is not None:
        console.print()
        console.print(f"Personal best: [bold]{best.weight:g} kg x {best.reps}[/bold] ({best.date[:10]})")
    console.print(f"Current reference weight: [bold]{_fmt_weight(exercise.reference_weight)}[/bold]")


def print_alternatives(exercise: Exercise, alternatives: list[Alternative]) -> None:
    if not alternatives:
        console.print(f"[yellow]No alternatives available for {exercise.name}.[/yellow]")
        return
    console.print(f"[bold]Alternatives to {exercise.name}[/bold] ({exercise.muscle_group})")
    for i, alt in enumerate(alternatives, 1):
        reason = f" [dim]: {alt.reason}[/dim]" if alt.reason else ""
        console.print(f"  \\[{i}] {alt.name}{reason}")


def print_tips(exercise: Exercise, tips: list[str]) -> None:
    console.print(f"[bold]Form tips: {exercise.name}[/bold]")
    for tip in tips:
        console.print(f"  • {tip}")


def print_settings(settings: UserSettings, rules: ProgressionRules) -> None:
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right", style="bold")

    for group in MUSCLE_GROUPS:
        goal = settings.goal_for(group, rules.volume_goal)
        marker = "" if group in settings.volume_goals else " [dim](default)[/dim]"
        table.add_row(f"Weekly goal: {group}", f"{goal} sets{marker}")
    table.add_row("Default rest", f"{settings.default_rest_time} s")

    console.print(table)


def _clock(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def rest_countdown(seconds: int, sleep: Callable[[float], None] = time.sleep) -> bool:
    """
    Count the rest period down on a transient progress bar.

    Ctrl+C skips the rest of the countdown.

    Returns:
        True if the countdown ran to the end, False if it was skipped
    """
    with Progress(
        TextColumn("[cyan]Rest[/cyan]"),
        BarColumn(),
        TextColumn("{task.fields[left]}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("rest", total=seconds, left=_clock(seconds))
        try:
            for elapsed in range(1, seconds + 1):
                sleep(1)
                progress.update(task, completed=elapsed, left=_clock(seconds - elapsed))
        except KeyboardInterrupt:
            print_info("Rest skipped.")
            return False
    console.print("[bold green]Rest over. Next set![/bold green]")
    return True


def rest_reminder(seconds: int, sleep: Callable[[float], None] = time.sleep) -> None:
    """Live countdown on a terminal; a one-line reminder when output is redirected."""
    if seconds > 0 and console.is_terminal:
        rest_countdown(seconds, sleep)
    else:
        print_info(f"Set done. Rest {seconds} s.")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
