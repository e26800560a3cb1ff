"""
JSON serialization for purelift data models.

Handles conversion between dataclasses and JSON-compatible dicts.
Storage keys are snake_case and match the dataclass field names.
"""

import json
from typing import Any

from ..core.models import (
    MUSCLE_GROUPS,
    Exercise,
    MuscleGroup,
    Routine,
    SetLog,
    SetTarget,
    UserSettings,
    parse_timestamp,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_timestamp(value: Any) -> str:
    """
    Validate an ISO-8601 timestamp string.

    Args:
        value: Stored value

    Returns:
        The timestamp unchanged

    Raises:
        ValidationError: If the value is not a parseable timestamp
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date: {value!r}. Expected ISO-8601 string")
    try:
        parse_timestamp(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}") from e
    return value


def validate_muscle_group(group: Any) -> MuscleGroup:
    """
    Validate a muscle group name.

    Raises:
        ValidationError: If group is not one of MUSCLE_GROUPS
    """
    if group not in MUSCLE_GROUPS:
        raise ValidationError(
            f"Invalid muscle_group: {group!r}. Must be one of {MUSCLE_GROUPS}"
        )
    return group  # type: ignore


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require(data: dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in data]
    if missing:
        raise ValidationError(f"Missing fields: {missing}")


# =============================================================================
# Exercise
# =============================================================================


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    return {
        "id": exercise.id,
        "name": exercise.name,
        "muscle_group": exercise.muscle_group,
        "reference_weight": exercise.reference_weight,
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "id", "name", "muscle_group")
    validate_muscle_group(data["muscle_group"])
    try:
        return Exercise(
            id=str(data["id"]),
            name=str(data["name"]),
            muscle_group=data["muscle_group"],
            reference_weight=float(data.get("reference_weight", 0.0)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid exercise {data.get('id')!r}: {e}") from e


# =============================================================================
# SetLog
# =============================================================================


def set_log_to_dict(s: SetLog) -> dict[str, Any]:
    return {
        "id": s.id,
        "exercise_id": s.exercise_id,
        "date": s.date,
        "weight": s.weight,
        "reps": s.reps,
        "target_reps": s.target_reps,
        "completed": s.completed,
    }


def dict_to_set_log(data: dict[str, Any]) -> SetLog:
    """
    Convert dict to SetLog.

    target_reps defaults to reps and completed to True: only completed
    sets are ever written to history.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "id", "exercise_id", "date", "weight", "reps")
    validate_timestamp(data["date"])
    try:
        reps = int(data["reps"])
        return SetLog(
            id=str(data["id"]),
            exercise_id=str(data["exercise_id"]),
            date=data["date"],
            weight=float(data["weight"]),
            reps=reps,
            target_reps=int(data.get("target_reps", reps)),
            completed=bool(data.get("completed", True)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set {data.get('id')!r}: {e}") from e


def set_log_to_json_line(s: SetLog) -> str:
    """Convert a SetLog to a single JSON line (no trailing newline)."""
    return json.dumps(set_log_to_dict(s), separators=(",", ":"))


def json_line_to_set_log(line: str) -> SetLog:
    """
    Parse a single JSON line to SetLog.

    Raises:
        ValidationError: If the line is not valid JSON or not a valid set
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Set record must be a JSON object")
    return dict_to_set_log(data)


# =============================================================================
# Routine
# =============================================================================


def routine_to_dict(routine: Routine) -> dict[str, Any]:
    """
    Convert Routine to JSON-compatible dict.

    Targets are stored as {exercise_id: {"sets": N, "reps": M}}.
    """
    return {
        "id": routine.id,
        "name": routine.name,
        "exercise_ids": list(routine.exercise_ids),
        "targets": {
            exercise_id: {"sets": t.sets, "reps": t.reps}
            for exercise_id, t in routine.targets.items()
        },
    }


def dict_to_set_target(data: dict[str, Any]) -> SetTarget:
    sets = validate_non_negative(int(data.get("sets", 0)), "sets")
    reps = validate_non_negative(int(data.get("reps", 0)), "reps")
    return SetTarget(sets=int(sets), reps=int(reps))


def dict_to_routine(data: dict[str, Any]) -> Routine:
    """
    Convert dict to Routine.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "id", "name")
    exercise_ids = data.get("exercise_ids") or []
    targets = data.get("targets") or {}
    if not isinstance(exercise_ids, list):
        raise ValidationError(f"exercise_ids must be a list, got {type(exercise_ids).__name__}")
    if not isinstance(targets, dict):
        raise ValidationError(f"targets must be a mapping, got {type(targets).__name__}")
    try:
        return Routine(
            id=str(data["id"]),
            name=str(data["name"]),
            exercise_ids=[str(x) for x in exercise_ids],
            targets={str(k): dict_to_set_target(v) for k, v in targets.items()},
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise ValidationError(f"Invalid routine {data.get('id')!r}: {e}") from e


# =============================================================================
# UserSettings
# =============================================================================


def settings_to_dict(settings: UserSettings) -> dict[str, Any]:
    return {
        "volume_goals": dict(settings.volume_goals),
        "default_rest_time": settings.default_rest_time,
    }


def dict_to_settings(data: dict[str, Any]) -> UserSettings:
    """
    Convert dict to UserSettings.

    Goals for unknown muscle groups are rejected rather than dropped.

    Raises:
        ValidationError: If data is invalid
    """
    goals = data.get("volume_goals") or {}
    if not isinstance(goals, dict):
        raise ValidationError("volume_goals must be a mapping")
    try:
        parsed = {}
        for group, goal in goals.items():
            validate_muscle_group(group)
            parsed[group] = int(validate_non_negative(int(goal), f"volume_goals[{group}]"))
        return UserSettings(
            volume_goals=parsed,
            default_rest_time=int(data.get("default_rest_time", UserSettings().default_rest_time)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid settings: {e}") from e
