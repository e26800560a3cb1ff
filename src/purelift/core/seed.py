"""
YAML → starter catalog loader.

Loads the exercises and push/pull/legs routines a new user starts with
from the bundled ``src/purelift/data/starter.yaml``.

Usage (internal, called by io/store.py when seeding):
    from purelift.core.seed import load_starter_catalog
    exercises, routines = load_starter_catalog()

A malformed entry is skipped with a warning; a missing or unreadable file
raises RuntimeError, since seeding without a catalog makes no sense.
"""

from __future__ import annotations

import importlib.resources
import warnings

import yaml

from .models import Exercise, Routine, SetTarget

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {"id", "name", "muscle_group", "reference_weight"}
)

_REQUIRED_ROUTINE_FIELDS: frozenset[str] = frozenset({"id", "name", "exercise_ids"})


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")
    return Exercise(
        id=str(d["id"]),
        name=str(d["name"]),
        muscle_group=str(d["muscle_group"]),  # type: ignore[arg-type]
        reference_weight=float(d["reference_weight"]),
    )


def routine_from_dict(d: dict) -> Routine:
    """Convert a raw dict (from YAML) to a Routine.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_ROUTINE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Routine missing fields: {sorted(missing)}")
    targets_raw = d.get("targets") or {}
    targets = {
        str(k): SetTarget(sets=int(v["sets"]), reps=int(v["reps"]))
        for k, v in targets_raw.items()
    }
    return Routine(
        id=str(d["id"]),
        name=str(d["name"]),
        exercise_ids=[str(x) for x in d["exercise_ids"]],
        targets=targets,
    )


def _read_bundled_starter() -> dict:
    ref = importlib.resources.files("purelift").joinpath("data").joinpath("starter.yaml")
    try:
        data = yaml.safe_load(ref.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise RuntimeError(f"purelift: cannot read starter catalog ({exc})") from exc
    if not isinstance(data, dict):
        raise RuntimeError("purelift: starter catalog must be a mapping")
    return data


def load_starter_catalog() -> tuple[list[Exercise], list[Routine]]:
    """Return (exercises, routines) from the bundled starter YAML.

    Routines only keep exercise ids that exist in the loaded catalog.
    """
    data = _read_bundled_starter()

    exercises: list[Exercise] = []
    for raw in data.get("exercises") or []:
        try:
            exercises.append(exercise_from_dict(raw))
        except (ValueError, TypeError, KeyError) as exc:
            warnings.warn(f"purelift: skipping starter exercise {raw!r}: {exc}", stacklevel=2)

    known = {ex.id for ex in exercises}
    routines: list[Routine] = []
    for raw in data.get("routines") or []:
        try:
            routine = routine_from_dict(raw)
        except (ValueError, TypeError, KeyError) as exc:
            warnings.warn(f"purelift: skipping starter routine {raw!r}: {exc}", stacklevel=2)
            continue
        routine.exercise_ids = [i for i in routine.exercise_ids if i in known]
        routines.append(routine)

    return exercises, routines
