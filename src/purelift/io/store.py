"""
File-backed storage for the exercise catalog, set history, routines and
settings.

Layout, one directory per user under the data home:

    <data home>/users/<user>/exercises.json   list of exercise records
    <data home>/users/<user>/routines.json    list of routine records
    <data home>/users/<user>/settings.json    single settings record
    <data home>/users/<user>/sets.jsonl       one completed set per line, append-only
"""

import getpass
import json
import os
from pathlib import Path
from typing import Any, Callable

from ..core.engine.config_loader import get_data_home
from ..core.models import Exercise, Routine, SetLog, UserSettings
from ..core.seed import load_starter_catalog
from .gateway import CurrentUser, NotSignedInError, StorageError
from .serializers import (
    ValidationError,
    dict_to_exercise,
    dict_to_routine,
    dict_to_settings,
    exercise_to_dict,
    json_line_to_set_log,
    routine_to_dict,
    set_log_to_json_line,
    settings_to_dict,
)


class JsonStore:
    """
    DataGateway implementation over plain JSON files.

    The current user is resolved on every call, so a store can outlive a
    sign-in change.  Missing files read as empty; writes create the user
    directory on demand.
    """

    def __init__(self, data_home: str | Path, current_user: CurrentUser):
        """
        Initialize the store.

        Args:
            data_home: Root directory holding every user's data
            current_user: Accessor for the signed-in user id
        """
        self.data_home = Path(data_home)
        self.current_user = current_user

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def user_dir(self) -> Path:
        user = self.current_user()
        if not user:
            raise NotSignedInError("No user signed in")
        return self.data_home / "users" / user

    @property
    def exercises_path(self) -> Path:
        return self.user_dir / "exercises.json"

    @property
    def routines_path(self) -> Path:
        return self.user_dir / "routines.json"

    @property
    def settings_path(self) -> Path:
        return self.user_dir / "settings.json"

    @property
    def sets_path(self) -> Path:
        return self.user_dir / "sets.jsonl"

    # ------------------------------------------------------------------
    # Low-level JSON helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON in {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def _read_records(self, path: Path, convert: Callable[[dict], Any]) -> list:
        data = self._read_json(path, [])
        if not isinstance(data, list):
            raise StorageError(f"Expected a JSON list in {path}")
        records = []
        for index, item in enumerate(data):
            try:
                if not isinstance(item, dict):
                    raise ValidationError("record must be a JSON object")
                records.append(convert(item))
            except ValidationError as e:
                raise ValidationError(f"Error parsing record {index} in {path}: {e}") from e
        return records

    # ------------------------------------------------------------------
    # Loads
    # ------------------------------------------------------------------

    def load_exercises(self) -> list[Exercise]:
        return self._read_records(self.exercises_path, dict_to_exercise)

    def load_routines(self) -> list[Routine]:
        return self._read_records(self.routines_path, dict_to_routine)

    def load_settings(self) -> UserSettings | None:
        data = self._read_json(self.settings_path, None)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self.settings_path}")
        try:
            return dict_to_settings(data)
        except ValidationError as e:
            raise ValidationError(f"Error parsing {self.settings_path}: {e}") from e

    def load_sets(self) -> list[SetLog]:
        """
        Load the full set history.

        Returns:
            List of SetLog in file (append) order

        Raises:
            ValidationError: If a line is malformed
        """
        path = self.sets_path
        if not path.exists():
            return []

        sets: list[SetLog] = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        sets.append(json_line_to_set_log(line))
                    except ValidationError as e:
                        raise ValidationError(
                            f"Error parsing line {line_num} in {path}: {e}"
                        ) from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        return sets

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_exercise(self, exercise: Exercise) -> None:
        """Insert or replace the exercise with the same id."""
        records = [exercise_to_dict(ex) for ex in self.load_exercises()]
        for i, record in enumerate(records):
            if record["id"] == exercise.id:
                records[i] = exercise_to_dict(exercise)
                break
        else:
            records.append(exercise_to_dict(exercise))
        self._write_json(self.exercises_path, records)

    def append_sets(self, sets: list[SetLog]) -> None:
        """Append sets to the history file; existing lines are never touched."""
        if not sets:
            return
        path = self.sets_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                for s in sets:
                    f.write(set_log_to_json_line(s) + "\n")
        except OSError as e:
            raise StorageError(f"Cannot append to {path}: {e}") from e

    def save_routines(self, routines: list[Routine]) -> None:
        """Upsert each routine by id; routines not given are left alone."""
        by_id = {r.id: r for r in self.load_routines()}
        for routine in routines:
            by_id[routine.id] = routine
        self._write_json(self.routines_path, [routine_to_dict(r) for r in by_id.values()])

    def delete_routine(self, routine_id: str) -> None:
        routines = self.load_routines()
        remaining = [r for r in routines if r.id != routine_id]
        if len(remaining) == len(routines):
            raise StorageError(f"Routine not found: {routine_id}")
        self._write_json(self.routines_path, [routine_to_dict(r) for r in remaining])

    def save_settings(self, settings: UserSettings) -> None:
        self._write_json(self.settings_path, settings_to_dict(settings))

    def seed_defaults(self) -> tuple[list[Exercise], list[Routine]]:
        """
        Write the starter catalog for a user with no exercises and no routines.

        Returns:
            (exercises, routines) as now stored.  If either list was already
            non-empty nothing is written and the stored data is returned.
        """
        exercises = self.load_exercises()
        routines = self.load_routines()
        if exercises or routines:
            return exercises, routines

        try:
            exercises, routines = load_starter_catalog()
        except RuntimeError as e:
            raise StorageError(str(e)) from e
        self._write_json(self.exercises_path, [exercise_to_dict(ex) for ex in exercises])
        self._write_json(self.routines_path, [routine_to_dict(r) for r in routines])
        return exercises, routines


def local_user() -> str | None:
    """
    Resolve the current user id.

    $PURELIFT_USER wins; otherwise the OS login name.  None if neither is
    available.
    """
    env = os.environ.get("PURELIFT_USER")
    if env and env.strip():
        return env.strip()
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def get_default_store(data_home: str | Path | None = None, user: str | None = None) -> JsonStore:
    """
    Get a JsonStore for the given (or default) data home and user.

    Args:
        data_home: Root directory (default: $PURELIFT_HOME or ~/.purelift)
        user: Fixed user id (default: local_user())

    Returns:
        JsonStore instance
    """
    home = Path(data_home).expanduser() if data_home else get_data_home()
    accessor: CurrentUser = (lambda: user) if user else local_user
    return JsonStore(home, accessor)
