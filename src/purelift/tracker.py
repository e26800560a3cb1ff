"""
Tracker: the orchestration layer between a user interface and the core.

Holds the in-memory domain model (catalog, history, routines, settings),
the live workout session, and talks to the Data Gateway and the Advisory
Gateway in the order the core requires.  The CLI is one client; any other
shell can drive the same object.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from .advisory.advisor import Advisor
from .core.catalog import (
    add_exercise_to_routine,
    ensure_exercise,
    new_routine,
    remove_exercise_from_routine,
    rename_routine,
    resolve_exercise_ref,
    routine_from_generated,
    set_routine_target,
)
from .core.config import ProgressionRules
from .core.models import (
    Alternative,
    Exercise,
    ExerciseClassification,
    Routine,
    SetLog,
    UserSettings,
    WeeklyVolume,
)
from .core.overload import finish_session
from .core.planner import adhoc_sets, build_session
from .core.session import SetCompletedListener, WorkoutSession
from .core.volume import compute_weekly_volume
from .io.gateway import DataGateway, StorageError
from .io.serializers import ValidationError


class NoActiveSessionError(RuntimeError):
    """Raised when a session operation is attempted with no workout running."""

    pass


@dataclass
class FinishReport:
    """
    What finish_session managed to persist.

    failures lists one message per gateway call that failed; the other
    steps still ran.
    """

    updated: list[Exercise] = field(default_factory=list)
    persisted: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Tracker:
    def __init__(
        self,
        gateway: DataGateway,
        advisor: Advisor | None = None,
        rules: ProgressionRules | None = None,
    ):
        self.gateway = gateway
        self.advisor = advisor or Advisor()
        self.rules = rules or ProgressionRules()

        self.exercises: list[Exercise] = []
        self.sets: list[SetLog] = []
        self.routines: list[Routine] = []
        self.settings = UserSettings()
        self.active_routine_id: str | None = None
        self.session: WorkoutSession | None = None
        self._set_completed_listeners: list[SetCompletedListener] = []

    # ------------------------------------------------------------------
    # Load cycle
    # ------------------------------------------------------------------

    def load(self, seed: bool = True) -> None:
        """
        Replace the in-memory model with what storage holds.

        A user with no exercises and no routines gets the starter catalog
        first (when seed is True).

        Raises:
            StorageError / ValidationError: On unreadable storage
        """
        exercises = self.gateway.load_exercises()
        routines = self.gateway.load_routines()
        if seed and not exercises and not routines:
            exercises, routines = self.gateway.seed_defaults()

        self.exercises = list(exercises)
        self.routines = list(routines)
        self.sets = self.gateway.load_sets()
        self.settings = self.gateway.load_settings() or UserSettings(
            default_rest_time=self.rules.rest_seconds
        )

        if self.active_routine_id not in {r.id for r in self.routines}:
            self.active_routine_id = self.routines[0].id if self.routines else None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def exercise(self, exercise_id: str) -> Exercise:
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        raise KeyError(f"Unknown exercise: {exercise_id}")

    def find_exercise(self, ref: str) -> Exercise | None:
        """Exercise by id or case-insensitive name."""
        return resolve_exercise_ref(self.exercises, ref)

    def routine(self, routine_id: str) -> Routine:
        for r in self.routines:
            if r.id == routine_id:
                return r
        raise KeyError(f"Unknown routine: {routine_id}")

    @property
    def active_routine(self) -> Routine | None:
        if self.active_routine_id is None:
            return None
        return next((r for r in self.routines if r.id == self.active_routine_id), None)

    def select_routine(self, routine_id: str) -> Routine:
        routine = self.routine(routine_id)
        self.active_routine_id = routine.id
        return routine

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def weekly_volume(self, now: datetime | None = None) -> list[WeeklyVolume]:
        return compute_weekly_volume(
            self.sets,
            self.exercises,
            self.settings.volume_goals,
            now=now,
            default_goal=self.rules.volume_goal,
        )

    def coach_insight(self, now: datetime | None = None) -> str:
        return self.advisor.get_coach_insight(self.weekly_volume(now))

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def _ensure_exercise(self, classification: ExerciseClassification) -> Exercise:
        exercise, created = ensure_exercise(classification, self.exercises)
        if created:
            self.gateway.save_exercise(exercise)
            self.exercises.append(exercise)
        return exercise

    def add_custom_exercise(self, text: str, routine_id: str | None = None) -> Exercise:
        """
        Classify free text and add it to the catalog (once per name).

        With routine_id, the exercise is also appended to that routine if it
        is not already there.
        """
        exercise = self._ensure_exercise(self.advisor.classify_exercise(text))
        if routine_id is not None:
            self.add_to_routine(routine_id, exercise.id)
        return exercise

    def alternatives(self, exercise_id: str) -> list[Alternative]:
        ex = self.exercise(exercise_id)
        return self.advisor.suggest_alternatives(ex.name, ex.muscle_group)

    def form_tips(self, exercise_id: str) -> list[str]:
        return self.advisor.get_form_tips(self.exercise(exercise_id).name)

    # ------------------------------------------------------------------
    # Live session
    # ------------------------------------------------------------------

    def on_set_completed(self, listener: SetCompletedListener) -> None:
        """Register a listener attached to every session started afterwards."""
        self._set_completed_listeners.append(listener)

    def _require_session(self) -> WorkoutSession:
        if self.session is None:
            raise NoActiveSessionError("No workout in progress")
        return self.session

    def start_session(self, routine_id: str | None = None, now: str | None = None) -> WorkoutSession:
        """
        Start a workout from a routine (default: the active one).

        With no routine at all the session starts empty and is filled with
        ad-hoc exercises.
        """
        routine = self.select_routine(routine_id) if routine_id else self.active_routine
        sets = build_session(routine, self.exercises, now, self.rules) if routine else []
        self.session = WorkoutSession(sets, routine.id if routine else None)
        for listener in self._set_completed_listeners:
            self.session.on_set_completed(listener)
        return self.session

    def add_to_session(self, text: str) -> Exercise:
        """Classify free text and append a 3x10 block for it to the live session."""
        session = self._require_session()
        exercise = self._ensure_exercise(self.advisor.classify_exercise(text))
        session.add_sets(adhoc_sets(exercise))
        return exercise

    def swap_exercise(self, old_exercise_id: str, new_exercise_name: str) -> Exercise:
        """Replace an exercise in the live session by a (possibly new) one."""
        session = self._require_session()
        replacement = self._ensure_exercise(self.advisor.classify_exercise(new_exercise_name))
        session.swap_exercise(old_exercise_id, replacement.id, replacement.reference_weight)
        return replacement

    def finish_session(self) -> FinishReport:
        """
        Resolve and persist the live session, then reload.

        Order: reference-weight updates, then the completed sets, then a
        full reload.  Each step is attempted even if an earlier one failed.
        The session is cleared in every case.
        """
        session = self._require_session()
        outcome = finish_session(session.sets, self.exercises, self.rules)
        report = FinishReport()

        for exercise in outcome.exercise_updates:
            try:
                self.gateway.save_exercise(exercise)
                report.updated.append(exercise)
            except (StorageError, ValidationError) as e:
                report.failures.append(f"Could not update {exercise.name}: {e}")

        try:
            self.gateway.append_sets(outcome.sets_to_persist)
            report.persisted = len(outcome.sets_to_persist)
        except (StorageError, ValidationError) as e:
            report.failures.append(f"Could not save {len(outcome.sets_to_persist)} sets: {e}")

        try:
            self.load(seed=False)
        except (StorageError, ValidationError) as e:
            report.failures.append(f"Could not reload data: {e}")

        session.clear()
        self.session = None
        return report

    def abandon_session(self) -> None:
        """Drop the live session; nothing is persisted."""
        if self.session is not None:
            self.session.clear()
        self.session = None

    # ------------------------------------------------------------------
    # Routines
    # ------------------------------------------------------------------

    def _store_routine(self, routine: Routine) -> Routine:
        self.gateway.save_routines([routine])
        for i, r in enumerate(self.routines):
            if r.id == routine.id:
                self.routines[i] = routine
                break
        else:
            self.routines.append(routine)
        return routine

    def create_routine(self, name: str, exercise_ids: Iterable[str] = ()) -> Routine:
        return self._store_routine(new_routine(name, exercise_ids))

    def rename_routine(self, routine_id: str, name: str) -> Routine:
        return self._store_routine(rename_routine(self.routine(routine_id), name))

    def delete_routine(self, routine_id: str) -> None:
        self.routine(routine_id)
        self.gateway.delete_routine(routine_id)
        self.routines = [r for r in self.routines if r.id != routine_id]
        if self.active_routine_id == routine_id:
            self.active_routine_id = self.routines[0].id if self.routines else None

    def add_to_routine(self, routine_id: str, exercise_id: str) -> Routine:
        self.exercise(exercise_id)
        routine = self.routine(routine_id)
        updated = add_exercise_to_routine(routine, exercise_id, self.rules)
        if updated is routine:
            return routine
        return self._store_routine(updated)

    def remove_from_routine(self, routine_id: str, exercise_id: str) -> Routine:
        return self._store_routine(remove_exercise_from_routine(self.routine(routine_id), exercise_id))

    def set_target(
        self,
        routine_id: str,
        exercise_id: str,
        sets: int | None = None,
        reps: int | None = None,
    ) -> Routine:
        routine = set_routine_target(self.routine(routine_id), exercise_id, sets, reps, self.rules)
        return self._store_routine(routine)

    def generate_routine(self, request: str) -> Routine | None:
        """
        Ask the advisor for a routine and store it with any new exercises.

        Returns None when the advisor could not produce one.
        """
        generated = self.advisor.generate_routine(request)
        if generated is None:
            return None
        routine, created = routine_from_generated(generated, self.exercises)
        for exercise in created:
            self.gateway.save_exercise(exercise)
            self.exercises.append(exercise)
        return self._store_routine(routine)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_settings(
        self,
        volume_goals: dict[str, int] | None = None,
        default_rest_time: int | None = None,
    ) -> UserSettings:
        """Persist settings; both fields are always written together."""
        settings = UserSettings(
            volume_goals=dict(self.settings.volume_goals if volume_goals is None else volume_goals),
            default_rest_time=(
                self.settings.default_rest_time if default_rest_time is None else default_rest_time
            ),
        )
        self.gateway.save_settings(settings)
        self.settings = settings
        return settings

    def set_volume_goal(self, muscle_group: str, goal: int) -> UserSettings:
        return self.update_settings(volume_goals={**self.settings.volume_goals, muscle_group: goal})
