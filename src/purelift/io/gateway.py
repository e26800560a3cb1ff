"""
Data Gateway contract.

The tracker talks to storage only through this protocol, so the JSON file
store can be replaced by any backend with the same load/save primitives.

Write methods return None on success and raise StorageError on failure;
the caller decides how to react.
"""

from typing import Callable, Protocol

from ..core.models import Exercise, Routine, SetLog, UserSettings

# Accessor returning the signed-in user id, or None when nobody is signed in.
CurrentUser = Callable[[], str | None]


class StorageError(Exception):
    """Raised when a Data Gateway read or write fails."""

    pass


class NotSignedInError(StorageError):
    """Raised when a gateway call is made without a current user."""

    pass


class DataGateway(Protocol):
    def load_exercises(self) -> list[Exercise]: ...

    def load_sets(self) -> list[SetLog]:
        """All historical sets, in no particular order."""
        ...

    def load_routines(self) -> list[Routine]: ...

    def load_settings(self) -> UserSettings | None: ...

    def save_exercise(self, exercise: Exercise) -> None:
        """Upsert by id."""
        ...

    def append_sets(self, sets: list[SetLog]) -> None:
        """Insert-only; existing rows are never rewritten."""
        ...

    def save_routines(self, routines: list[Routine]) -> None:
        """Upsert each routine by id, replacing it whole."""
        ...

    def delete_routine(self, routine_id: str) -> None: ...

    def save_settings(self, settings: UserSettings) -> None:
        """Single row per user, upsert."""
        ...

    def seed_defaults(self) -> tuple[list[Exercise], list[Routine]]:
        """
        Populate the starter catalog for an empty user.

        Idempotent: with data already present nothing is written and the
        existing exercises and routines are returned unchanged.
        """
        ...
