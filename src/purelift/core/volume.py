"""
Weekly volume aggregation.

Counts completed sets per muscle group since the start of the current
training week and pairs each count with the user's weekly goal.

The week starts on Monday 00:00 local time.  Sunday is the LAST day of
the week, so on a Sunday the window reaches back six days.
"""

from datetime import datetime, timedelta
from typing import Iterable, Mapping

from .config import DEFAULT_VOLUME_GOAL
from .models import MUSCLE_GROUPS, Exercise, SetLog, WeeklyVolume, parse_timestamp


def week_start(now: datetime) -> datetime:
    """
    Return Monday 00:00:00 of the week containing *now*.

    Python's weekday() is Monday=0 … Sunday=6, which is exactly the number
    of days to step back (Sunday → 6).  The result keeps now's tzinfo.

    Examples:
        Wed 2024-06-05 18:30 → Mon 2024-06-03 00:00
        Sun 2024-06-09 09:00 → Mon 2024-06-03 00:00
        Mon 2024-06-10 00:00 → Mon 2024-06-10 00:00
    """
    start = now - timedelta(days=now.weekday())
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def _in_frame_of(stamp: datetime, now: datetime) -> datetime:
    """Express *stamp* in the same clock as *now* so they compare directly."""
    if now.tzinfo is None:
        if stamp.tzinfo is None:
            return stamp
        # Aware stamp vs naive local "now": convert to local wall clock.
        return stamp.astimezone().replace(tzinfo=None)
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=now.tzinfo)
    return stamp.astimezone(now.tzinfo)


def sets_since(all_sets: Iterable[SetLog], start: datetime) -> list[SetLog]:
    """Completed sets dated at or after *start* (inclusive boundary)."""
    selected: list[SetLog] = []
    for s in all_sets:
        if not s.completed:
            continue
        try:
            stamp = parse_timestamp(s.date)
        except ValueError:
            continue
        if _in_frame_of(stamp, start) >= start:
            selected.append(s)
    return selected


def compute_weekly_volume(
    all_sets: Iterable[SetLog],
    exercises: Iterable[Exercise],
    volume_goals: Mapping[str, int] | None,
    now: datetime | None = None,
    default_goal: int = DEFAULT_VOLUME_GOAL,
) -> list[WeeklyVolume]:
    """
    Reduce set history to this week's per-muscle-group set counts.

    Pure function: no mutation of inputs, no I/O.  The result always holds
    one entry per muscle group, in enumeration order, even when the count
    is zero.  Sets whose exercise is not in the catalog are not counted.

    Args:
        all_sets: Full set history (any order)
        exercises: Exercise catalog
        volume_goals: Weekly set goal per muscle group (missing → default_goal)
        now: Reference instant (default: current local time)
        default_goal: Goal used for groups absent from volume_goals

    Returns:
        List of WeeklyVolume, one per muscle group
    """
    if now is None:
        now = datetime.now()
    goals = volume_goals or {}
    start = week_start(now)

    group_by_exercise = {ex.id: ex.muscle_group for ex in exercises}
    counts: dict[str, int] = {group: 0 for group in MUSCLE_GROUPS}

    for s in sets_since(all_sets, start):
        group = group_by_exercise.get(s.exercise_id)
        if group is not None:
            counts[group] += 1

    return [
        WeeklyVolume(muscle_group=group, count=counts[group], goal=goals.get(group, default_goal))
        for group in MUSCLE_GROUPS
    ]


def volume_summary(volumes: Iterable[WeeklyVolume]) -> str:
    """One-line text summary, e.g. "Chest: 4/15 sets, Back: 0/15 sets"."""
    return ", ".join(f"{v.muscle_group}: {v.count}/{v.goal} sets" for v in volumes)
