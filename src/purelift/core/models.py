"""
Data models for purelift.

All core dataclasses representing the exercise catalog, logged sets,
routines, settings and the shapes exchanged with the advisory service.
Only SetLog is mutated in place, and only while it belongs to a live
(unpersisted) session.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from .config import DEFAULT_REST_SECONDS, DEFAULT_TARGET_REPS, DEFAULT_TARGET_SETS, DEFAULT_VOLUME_GOAL

MuscleGroup = Literal["Chest", "Back", "Legs", "Shoulders", "Arms", "Core"]

# Enumeration order is the display order of every per-group report.
MUSCLE_GROUPS: tuple[MuscleGroup, ...] = ("Chest", "Back", "Legs", "Shoulders", "Arms", "Core")


def normalize_name(name: str) -> str:
    """Canonical form used for exercise-name equality (case-insensitive)."""
    return name.strip().lower()


def names_match(a: str, b: str) -> bool:
    """Return True if two exercise names refer to the same exercise."""
    return normalize_name(a) == normalize_name(b)


def new_id() -> str:
    """Fresh unique identifier for exercises, sets and routines."""
    return uuid.uuid4().hex


def now_iso() -> str:
    """Current instant as an ISO-8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp or date.

    Accepts a trailing ``Z`` for UTC.  Raises ValueError on bad input.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class Exercise:
    """
    One catalog entry.

    reference_weight is the working weight used to seed new sets; only the
    overload resolver changes it.
    """

    id: str
    name: str
    muscle_group: MuscleGroup
    reference_weight: float = 0.0

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.name or not self.name.strip():
            raise ValueError("Exercise name must be non-empty")
        if self.muscle_group not in MUSCLE_GROUPS:
            raise ValueError(f"Invalid muscle_group: {self.muscle_group}")


@dataclass
class SetLog:
    """
    A single set.

    Planned while completed=False and part of a live session; historical
    once completed=True and persisted.  Numeric fields are not validated:
    in-session edits must accept any number, including zero or negatives.
    """

    id: str
    exercise_id: str
    date: str  # ISO-8601 timestamp
    weight: float
    reps: int
    target_reps: int
    completed: bool = False

    @property
    def meets_target(self) -> bool:
        """True when the set hit or exceeded its rep target."""
        return self.reps >= self.target_reps


@dataclass(frozen=True)
class SetTarget:
    """Per-exercise prescription inside a routine."""

    sets: int = DEFAULT_TARGET_SETS
    reps: int = DEFAULT_TARGET_REPS

    def __post_init__(self) -> None:
        if self.sets < 0:
            raise ValueError("SetTarget.sets must be non-negative")
        if self.reps < 0:
            raise ValueError("SetTarget.reps must be non-negative")

    def __str__(self) -> str:
        return f"{self.sets}x{self.reps}"


@dataclass
class Routine:
    """
    An ordered list of exercises plus optional per-exercise targets.

    targets need not mirror exercise_ids: a missing entry means the default
    target applies, and an entry for an exercise no longer in the routine is
    ignored.
    """

    id: str
    name: str
    exercise_ids: list[str] = field(default_factory=list)
    targets: dict[str, SetTarget] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Routine name must be non-empty")


@dataclass
class UserSettings:
    """
    Per-user preferences.  Always persisted as a whole.

    volume_goals maps muscle group → weekly set target; absent groups use
    the default goal.
    """

    volume_goals: dict[str, int] = field(default_factory=dict)
    default_rest_time: int = DEFAULT_REST_SECONDS

    def __post_init__(self) -> None:
        for group in self.volume_goals:
            if group not in MUSCLE_GROUPS:
                raise ValueError(f"Unknown muscle group in volume_goals: {group!r}")
        if self.default_rest_time < 0:
            raise ValueError("default_rest_time must be non-negative")

    def goal_for(self, group: str, default: int = DEFAULT_VOLUME_GOAL) -> int:
        return self.volume_goals.get(group, default)


@dataclass(frozen=True)
class WeeklyVolume:
    """Completed sets this week for one muscle group, against its goal."""

    muscle_group: MuscleGroup
    count: int
    goal: int

    @property
    def reached(self) -> bool:
        return self.count >= self.goal


@dataclass
class SessionOutcome:
    """
    Result of resolving a finished session.

    exercise_updates holds copies of exercises whose reference weight changed;
    sets_to_persist holds only completed sets.
    """

    exercise_updates: list[Exercise] = field(default_factory=list)
    sets_to_persist: list[SetLog] = field(default_factory=list)


# =============================================================================
# Advisory payload shapes (already validated by advisory.decoders)
# =============================================================================


@dataclass(frozen=True)
class ExerciseClassification:
    name: str
    muscle_group: MuscleGroup
    suggested_weight: float


@dataclass(frozen=True)
class Alternative:
    name: str
    reason: str


@dataclass(frozen=True)
class GeneratedExercise:
    name: str
    muscle_group: MuscleGroup
    suggested_weight: float
    target_sets: int
    target_reps: int


@dataclass(frozen=True)
class GeneratedRoutine:
    routine_name: str
    exercises: tuple[GeneratedExercise, ...] = ()
