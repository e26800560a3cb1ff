"""
Session builder.

Expands a routine into the concrete, ordered list of planned sets for a
live workout, and builds the fixed block of sets used when an exercise is
added on the fly.

Both paths take their default prescription from default_target() so the
routine fallback and the ad-hoc rule cannot drift apart.
"""

from typing import Iterable

from .config import ProgressionRules
from .models import Exercise, Routine, SetLog, SetTarget, new_id, now_iso


def default_target(rules: ProgressionRules | None = None) -> SetTarget:
    """Prescription used when a routine has no target entry for an exercise."""
    rules = rules or ProgressionRules()
    return SetTarget(sets=rules.target_sets, reps=rules.target_reps)


def adhoc_target() -> SetTarget:
    """Fixed prescription for exercises added mid-session.

    Uses the built-in default (3x10) and ignores YAML overrides and routine
    targets alike.
    """
    return default_target()


def target_for(
    routine: Routine,
    exercise_id: str,
    rules: ProgressionRules | None = None,
) -> SetTarget:
    """Return the routine's target for exercise_id, or the default target."""
    target = routine.targets.get(exercise_id)
    return target if target is not None else default_target(rules)


def planned_sets(exercise: Exercise, target: SetTarget, date: str | None = None) -> list[SetLog]:
    """
    Emit target.sets planned sets for one exercise.

    Each set starts at the exercise's reference weight with reps and
    target_reps both equal to target.reps.  Set #1 comes first.
    """
    date = date or now_iso()
    return [
        SetLog(
            id=new_id(),
            exercise_id=exercise.id,
            date=date,
            weight=exercise.reference_weight,
            reps=target.reps,
            target_reps=target.reps,
            completed=False,
        )
        for _ in range(target.sets)
    ]


def build_session(
    routine: Routine,
    exercises: Iterable[Exercise],
    now: str | None = None,
    rules: ProgressionRules | None = None,
) -> list[SetLog]:
    """
    Expand a routine into an ordered list of planned sets.

    Output order mirrors routine.exercise_ids; within an exercise, sets are
    emitted in ascending set number.  Exercise ids missing from the catalog
    are skipped silently (a tolerated inconsistency, not an error).

    Args:
        routine: Routine to expand
        exercises: Current exercise catalog
        now: ISO timestamp stamped on every set (default: current instant)
        rules: Progression rules supplying the default target

    Returns:
        List of SetLog with completed=False
    """
    catalog = {ex.id: ex for ex in exercises}
    date = now or now_iso()

    sets: list[SetLog] = []
    for exercise_id in routine.exercise_ids:
        exercise = catalog.get(exercise_id)
        if exercise is None:
            continue
        sets.extend(planned_sets(exercise, target_for(routine, exercise_id, rules), date))
    return sets


def adhoc_sets(exercise: Exercise, now: str | None = None) -> list[SetLog]:
    """Planned sets for an exercise added mid-session, ignoring any routine target."""
    return planned_sets(exercise, adhoc_target(), now)
