"""
Live workout session state and in-session edits.

WorkoutSession owns the ordered list of SetLog entries for the workout in
progress.  All operations are synchronous and do no I/O; persistence
happens only when the session is resolved (see core/overload.py).

Abandoning a session is simply dropping (or clear()-ing) the object:
nothing is saved and no partial credit is given.
"""

from typing import Callable, Iterable, Literal

from .models import SetLog

SetField = Literal["weight", "reps"]
SetCompletedListener = Callable[[SetLog], None]


class WorkoutSession:
    """
    In-memory sequence of planned/completed sets.

    Sets are grouped implicitly by exercise_id; exercise order is the order
    in which each exercise first appears in the sequence.
    """

    def __init__(self, sets: Iterable[SetLog] | None = None, routine_id: str | None = None):
        """
        Args:
            sets: Initial planned sets (usually from planner.build_session)
            routine_id: Routine the session was started from, if any
        """
        self.sets: list[SetLog] = list(sets or [])
        self.routine_id = routine_id
        self._listeners: list[SetCompletedListener] = []

    def __len__(self) -> int:
        return len(self.sets)

    def __bool__(self) -> bool:
        return bool(self.sets)

    @property
    def is_empty(self) -> bool:
        return not self.sets

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, set_id: str) -> SetLog:
        """Return the set with the given id; KeyError if absent."""
        for s in self.sets:
            if s.id == set_id:
                return s
        raise KeyError(set_id)

    def exercise_ids(self) -> list[str]:
        """Distinct exercise ids in order of first appearance."""
        return list(dict.fromkeys(s.exercise_id for s in self.sets))

    def sets_for(self, exercise_id: str) -> list[SetLog]:
        return [s for s in self.sets if s.exercise_id == exercise_id]

    def set_number(self, set_id: str) -> int:
        """1-based position of a set within its exercise group (the set badge)."""
        target = self.get(set_id)
        for i, s in enumerate(self.sets_for(target.exercise_id), 1):
            if s.id == set_id:
                return i
        raise KeyError(set_id)

    def completed_count(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def on_set_completed(self, listener: SetCompletedListener) -> None:
        """Register a callback fired when a set transitions to completed (e.g. a rest timer)."""
        self._listeners.append(listener)

    def add_sets(self, sets: Iterable[SetLog]) -> None:
        """Append sets (ad-hoc exercise) to the end of the session."""
        self.sets.extend(sets)

    def update_set(self, set_id: str, field: SetField, value: float) -> SetLog:
        """
        Replace weight or reps on one set.

        Any numeric value is accepted, including zero and negatives; coercing
        user input into a number is the caller's job.
        """
        if field not in ("weight", "reps"):
            raise ValueError(f"Cannot update field {field!r}; expected 'weight' or 'reps'")
        s = self.get(set_id)
        setattr(s, field, value)
        return s

    def toggle_complete(self, set_id: str) -> bool:
        """
        Flip a set's completed flag.

        Returns:
            True if the set just went from planned to completed.  Listeners
            are notified only on that transition.
        """
        s = self.get(set_id)
        s.completed = not s.completed
        if s.completed:
            for listener in self._listeners:
                listener(s)
        return s.completed

    def swap_exercise(self, old_exercise_id: str, new_exercise_id: str, new_reference_weight: float) -> int:
        """
        Point every set of one exercise at a replacement exercise.

        Only exercise_id and weight change; reps, target_reps, completed and
        set ordering are preserved.

        Returns:
            Number of sets rewritten
        """
        changed = 0
        for s in self.sets:
            if s.exercise_id == old_exercise_id:
                s.exercise_id = new_exercise_id
                s.weight = new_reference_weight
                changed += 1
        return changed

    def clear(self) -> None:
        """Discard all sets (finish or abandon)."""
        self.sets.clear()
        self.routine_id = None
