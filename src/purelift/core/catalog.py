"""
Exercise catalog lookups and routine editing rules.

Routines are treated as values: every edit returns a new Routine and
leaves the input untouched, so a caller can hold the previous snapshot
until the edit is persisted.
"""

from dataclasses import replace
from typing import Iterable

from .config import ProgressionRules
from .models import (
    Exercise,
    ExerciseClassification,
    GeneratedRoutine,
    Routine,
    SetTarget,
    names_match,
    new_id,
)
from .planner import default_target


def find_exercise(exercises: Iterable[Exercise], exercise_id: str) -> Exercise | None:
    return next((ex for ex in exercises if ex.id == exercise_id), None)


def find_exercise_by_name(exercises: Iterable[Exercise], name: str) -> Exercise | None:
    """Case-insensitive name lookup."""
    return next((ex for ex in exercises if names_match(ex.name, name)), None)


def resolve_exercise_ref(exercises: Iterable[Exercise], ref: str) -> Exercise | None:
    """Look an exercise up by id first, then by name."""
    exercises = list(exercises)
    return find_exercise(exercises, ref) or find_exercise_by_name(exercises, ref)


def ensure_exercise(
    classification: ExerciseClassification,
    exercises: Iterable[Exercise],
) -> tuple[Exercise, bool]:
    """
    Reuse the catalog entry matching a classified name, or create one.

    Returns:
        (exercise, created); created is True when the caller must persist it
    """
    existing = find_exercise_by_name(exercises, classification.name)
    if existing is not None:
        return existing, False
    created = Exercise(
        id=new_id(),
        name=classification.name.strip(),
        muscle_group=classification.muscle_group,
        reference_weight=max(0.0, float(classification.suggested_weight)),
    )
    return created, True


def new_routine(name: str, exercise_ids: Iterable[str] = ()) -> Routine:
    return Routine(id=new_id(), name=name.strip(), exercise_ids=list(exercise_ids))


def add_exercise_to_routine(
    routine: Routine,
    exercise_id: str,
    rules: ProgressionRules | None = None,
) -> Routine:
    """
    Append an exercise (once) and seed its target with the default.

    An exercise already in the routine leaves it unchanged.
    """
    if exercise_id in routine.exercise_ids:
        return routine
    targets = dict(routine.targets)
    targets[exercise_id] = default_target(rules)
    return replace(routine, exercise_ids=[*routine.exercise_ids, exercise_id], targets=targets)


def remove_exercise_from_routine(routine: Routine, exercise_id: str) -> Routine:
    """Drop every occurrence of an exercise; a leftover target entry is harmless."""
    return replace(routine, exercise_ids=[i for i in routine.exercise_ids if i != exercise_id])


def set_routine_target(
    routine: Routine,
    exercise_id: str,
    sets: int | None = None,
    reps: int | None = None,
    rules: ProgressionRules | None = None,
) -> Routine:
    """
    Edit one exercise's target.  Unspecified fields keep their current
    (or default) value.
    """
    current = routine.targets.get(exercise_id) or default_target(rules)
    target = SetTarget(
        sets=current.sets if sets is None else sets,
        reps=current.reps if reps is None else reps,
    )
    targets = dict(routine.targets)
    targets[exercise_id] = target
    return replace(routine, targets=targets)


def rename_routine(routine: Routine, name: str) -> Routine:
    if not name or not name.strip():
        raise ValueError("Routine name must be non-empty")
    return replace(routine, name=name.strip())


def routine_from_generated(
    generated: GeneratedRoutine,
    exercises: Iterable[Exercise],
) -> tuple[Routine, list[Exercise]]:
    """
    Turn a generated routine into a Routine over the catalog.

    Each generated exercise is matched by name (case-insensitive) or
    created.  Duplicate names inside the payload collapse to one entry.

    Returns:
        (routine, new_exercises); new_exercises must be persisted too
    """
    catalog = list(exercises)
    created: list[Exercise] = []
    exercise_ids: list[str] = []
    targets: dict[str, SetTarget] = {}

    for item in generated.exercises:
        exercise, is_new = ensure_exercise(
            ExerciseClassification(item.name, item.muscle_group, item.suggested_weight),
            catalog,
        )
        if is_new:
            catalog.append(exercise)
            created.append(exercise)
        if exercise.id in exercise_ids:
            continue
        exercise_ids.append(exercise.id)
        targets[exercise.id] = SetTarget(sets=item.target_sets, reps=item.target_reps)

    routine = Routine(id=new_id(), name=generated.routine_name, exercise_ids=exercise_ids, targets=targets)
    return routine, created
