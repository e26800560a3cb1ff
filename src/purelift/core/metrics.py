"""
History metrics.

Read-only reductions over the logged set history used by the progress and
history views.
"""

from datetime import date
from typing import Iterable

from .config import PROGRESS_POINTS
from .models import SetLog, parse_timestamp


def _set_day(s: SetLog) -> date | None:
    try:
        return parse_timestamp(s.date).date()
    except ValueError:
        return None


def completed_sets_for(all_sets: Iterable[SetLog], exercise_id: str) -> list[SetLog]:
    return [s for s in all_sets if s.completed and s.exercise_id == exercise_id]


def exercise_progress(
    all_sets: Iterable[SetLog],
    exercise_id: str,
    limit: int = PROGRESS_POINTS,
) -> list[tuple[date, float]]:
    """
    Heaviest completed weight per training day for one exercise.

    Args:
        all_sets: Set history (any order)
        exercise_id: Exercise to chart
        limit: Keep only the most recent N days

    Returns:
        [(day, max_weight), ...] sorted by day ascending
    """
    best: dict[date, float] = {}
    for s in completed_sets_for(all_sets, exercise_id):
        day = _set_day(s)
        if day is None:
            continue
        best[day] = max(best.get(day, s.weight), s.weight)

    points = sorted(best.items())
    return points[-limit:] if limit > 0 else points


def personal_best(all_sets: Iterable[SetLog], exercise_id: str) -> SetLog | None:
    """Heaviest completed set (ties broken by more reps)."""
    sets = completed_sets_for(all_sets, exercise_id)
    if not sets:
        return None
    return max(sets, key=lambda s: (s.weight, s.reps))


def session_volume_load(sets: Iterable[SetLog]) -> float:
    """Sum of weight × reps over completed sets."""
    return sum(s.weight * s.reps for s in sets if s.completed)


def group_by_day(all_sets: Iterable[SetLog]) -> list[tuple[date, list[SetLog]]]:
    """Completed sets grouped per calendar day, newest day first."""
    days: dict[date, list[SetLog]] = {}
    for s in all_sets:
        if not s.completed:
            continue
        day = _set_day(s)
        if day is None:
            continue
        days.setdefault(day, []).append(s)
    return sorted(days.items(), key=lambda item: item[0], reverse=True)
