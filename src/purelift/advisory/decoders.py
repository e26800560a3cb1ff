"""
Validating decoders for advisory payloads.

Model output is untrusted JSON.  Each decoder coerces one payload into its
fixed shape, substituting a default for every missing or invalid field.
Only a payload of the wrong top-level type is rejected with AdvisoryError.
"""

import math
from typing import Any

from ..core.config import (
    DEFAULT_TARGET_REPS,
    DEFAULT_TARGET_SETS,
    FALLBACK_MUSCLE_GROUP,
    FALLBACK_ROUTINE_NAME,
    FALLBACK_SUGGESTED_WEIGHT,
)
from ..core.models import (
    MUSCLE_GROUPS,
    Alternative,
    ExerciseClassification,
    GeneratedExercise,
    GeneratedRoutine,
    MuscleGroup,
)


class AdvisoryError(Exception):
    """Raised when an advisory backend fails or returns an unusable payload."""

    pass


def _text(value: Any) -> str | None:
    """Stripped non-empty string, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _number(value: Any, default: float) -> float:
    """Finite non-negative number, or *default*.  Booleans are rejected."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return number


def _count(value: Any, default: int) -> int:
    """Positive integer, or *default*."""
    number = _number(value, -1.0)
    if number < 1:
        return default
    return int(round(number))


def coerce_muscle_group(value: Any, default: MuscleGroup = FALLBACK_MUSCLE_GROUP) -> MuscleGroup:  # type: ignore[assignment]
    """
    Map free text onto the muscle group enumeration.

    Matching is case-insensitive; a value that starts with a group name
    ("Back (Posterior Chain)") maps to that group.
    """
    text = _text(value)
    if text is None:
        return default
    lowered = text.lower()
    for group in MUSCLE_GROUPS:
        if lowered == group.lower():
            return group
    for group in MUSCLE_GROUPS:
        if lowered.startswith(group.lower()):
            return group
    return default


def decode_classification(payload: Any, user_input: str) -> ExerciseClassification:
    """Coerce a classification payload; the raw input is the fallback name."""
    if not isinstance(payload, dict):
        raise AdvisoryError(f"classification must be an object, got {type(payload).__name__}")
    return ExerciseClassification(
        name=_text(payload.get("name")) or user_input.strip(),
        muscle_group=coerce_muscle_group(payload.get("muscleGroup")),
        suggested_weight=_number(payload.get("suggestedWeight"), FALLBACK_SUGGESTED_WEIGHT),
    )


def decode_alternatives(payload: Any) -> list[Alternative]:
    """Keep every entry with a usable name; a missing reason becomes ""."""
    if not isinstance(payload, list):
        raise AdvisoryError(f"alternatives must be an array, got {type(payload).__name__}")
    alternatives = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        name = _text(item.get("name"))
        if name is None:
            continue
        alternatives.append(Alternative(name=name, reason=_text(item.get("reason")) or ""))
    return alternatives


def decode_form_tips(payload: Any) -> list[str]:
    if not isinstance(payload, list):
        raise AdvisoryError(f"form tips must be an array, got {type(payload).__name__}")
    return [tip for tip in (_text(item) for item in payload) if tip is not None]


def decode_generated_routine(payload: Any) -> GeneratedRoutine:
    """
    Coerce a generated routine.

    Exercises without a name are dropped; other fields fall back to the
    classification defaults and the 3x10 prescription.
    """
    if not isinstance(payload, dict):
        raise AdvisoryError(f"routine must be an object, got {type(payload).__name__}")
    raw_exercises = payload.get("exercises")
    if not isinstance(raw_exercises, list):
        raw_exercises = []

    exercises = []
    for item in raw_exercises:
        if not isinstance(item, dict):
            continue
        name = _text(item.get("name"))
        if name is None:
            continue
        exercises.append(
            GeneratedExercise(
                name=name,
                muscle_group=coerce_muscle_group(item.get("muscleGroup")),
                suggested_weight=_number(item.get("suggestedWeight"), FALLBACK_SUGGESTED_WEIGHT),
                target_sets=_count(item.get("targetSets"), DEFAULT_TARGET_SETS),
                target_reps=_count(item.get("targetReps"), DEFAULT_TARGET_REPS),
            )
        )

    return GeneratedRoutine(
        routine_name=_text(payload.get("routineName")) or FALLBACK_ROUTINE_NAME,
        exercises=tuple(exercises),
    )
