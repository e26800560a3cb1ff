"""
Progressive-overload resolution.

Turns a finished session into new reference weights and the list of sets
to append to history.

Rule table, applied per exercise present in the session:

    all planned sets completed AND every set reps >= target_reps
        → heaviest completed weight + increment          (progress)
    no set completed
        → max(0, reference_weight × deload_factor)       (deload)
    anything else
        → reference_weight                               (hold)

The new weight is rounded half up (one decimal by default) and an update
is only emitted when the rounded value differs from the current reference
weight.
"""

import math
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .config import ProgressionRules
from .models import Exercise, SessionOutcome, SetLog


def round_weight(weight: float, decimals: int) -> float:
    """
    Round half up to *decimals* places: 20.25 → 20.3 (round() gives 20.2).

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(weight):
        return weight
    step = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(weight)).quantize(step, rounding=ROUND_HALF_UP))


def is_all_successful(exercise_sets: list[SetLog]) -> bool:
    """Every planned set was completed and each one hit its rep target."""
    completed = [s for s in exercise_sets if s.completed]
    return len(completed) == len(exercise_sets) and all(s.meets_target for s in completed)


def resolve_reference_weight(
    exercise: Exercise,
    exercise_sets: list[SetLog],
    rules: ProgressionRules | None = None,
) -> float:
    """
    Compute the next reference weight for one exercise.

    Args:
        exercise: Catalog entry (current reference weight)
        exercise_sets: All of this exercise's sets from the session
        rules: Progression rules (increment, deload factor, rounding)

    Returns:
        Rounded new reference weight

    Examples (defaults):
        3/3 sets done at [60, 62.5, 62.5], reps >= 10 → 65.0
        0/3 sets done, reference 22 → 19.8
        2/3 sets done, reference 60 → 60.0
    """
    rules = rules or ProgressionRules()
    completed = [s for s in exercise_sets if s.completed]

    if completed and is_all_successful(exercise_sets):
        new_weight = max(s.weight for s in completed) + rules.weight_increment_kg
    elif not completed:
        new_weight = max(0.0, exercise.reference_weight * rules.deload_factor)
    else:
        new_weight = exercise.reference_weight

    return round_weight(new_weight, rules.weight_decimals)


def finish_session(
    session_sets: Iterable[SetLog],
    exercises: Iterable[Exercise],
    rules: ProgressionRules | None = None,
) -> SessionOutcome:
    """
    Resolve a finished session.

    Each exercise is processed independently.  Exercises that are no longer
    in the catalog get no update, but their completed sets are still kept.

    Args:
        session_sets: Every set of the live session, planned or completed
        exercises: Exercise catalog
        rules: Progression rules

    Returns:
        SessionOutcome with updated exercise copies and the completed sets
        to persist (incomplete sets are dropped for good)
    """
    session_sets = list(session_sets)
    catalog = {ex.id: ex for ex in exercises}

    by_exercise: dict[str, list[SetLog]] = {}
    for s in session_sets:
        by_exercise.setdefault(s.exercise_id, []).append(s)

    updates: list[Exercise] = []
    for exercise_id, exercise_sets in by_exercise.items():
        exercise = catalog.get(exercise_id)
        if exercise is None:
            continue
        new_weight = resolve_reference_weight(exercise, exercise_sets, rules)
        if new_weight != exercise.reference_weight:
            updates.append(replace(exercise, reference_weight=new_weight))

    return SessionOutcome(
        exercise_updates=updates,
        sets_to_persist=[s for s in session_sets if s.completed],
    )
