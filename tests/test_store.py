"""
Tests for the JSON file store and the serializers behind it.
"""

import json
import tempfile
from pathlib import Path

import pytest

from purelift.core.models import Exercise, Routine, SetLog, SetTarget, UserSettings
from purelift.io.gateway import NotSignedInError, StorageError
from purelift.io.serializers import (
    ValidationError,
    dict_to_routine,
    dict_to_set_log,
    dict_to_settings,
    json_line_to_set_log,
    set_log_to_json_line,
)
from purelift.io.store import JsonStore, get_default_store, local_user


@pytest.fixture
def temp_data_dir():
    """Create a temporary data home."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store(temp_data_dir):
    return JsonStore(temp_data_dir, lambda: "alice")


def _set(set_id: str, exercise_id: str = "bench", weight: float = 60.0) -> SetLog:
    return SetLog(
        id=set_id,
        exercise_id=exercise_id,
        date="2024-06-05T10:00:00.000Z",
        weight=weight,
        reps=10,
        target_reps=10,
        completed=True,
    )


class TestSeedDefaults:
    def test_seeds_empty_user(self, store):
        exercises, routines = store.seed_defaults()
        assert len(exercises) == 18
        assert len(routines) == 3
        assert store.exercises_path.exists()
        assert len(store.load_exercises()) == 18

    def test_second_call_writes_nothing(self, store):
        store.seed_defaults()
        bench = next(ex for ex in store.load_exercises() if ex.id == "bench-press")
        store.save_exercise(Exercise(bench.id, bench.name, bench.muscle_group, 62.5))
        before = store.exercises_path.stat().st_mtime_ns

        exercises, routines = store.seed_defaults()

        assert store.exercises_path.stat().st_mtime_ns == before
        assert next(ex for ex in exercises if ex.id == "bench-press").reference_weight == 62.5
        assert len(routines) == 3

    def test_existing_routine_blocks_seeding(self, store):
        store.save_routines([Routine(id="mine", name="Mine")])
        exercises, routines = store.seed_defaults()
        assert exercises == []
        assert [r.id for r in routines] == ["mine"]


class TestJsonStore:
    def test_empty_store_loads_empty(self, store):
        assert store.load_exercises() == []
        assert store.load_sets() == []
        assert store.load_routines() == []
        assert store.load_settings() is None

    def test_save_exercise_upserts(self, store):
        store.save_exercise(Exercise("a", "Curl", "Arms", 10))
        store.save_exercise(Exercise("b", "Row", "Back", 40))
        store.save_exercise(Exercise("a", "Curl", "Arms", 12.5))
        loaded = {ex.id: ex.reference_weight for ex in store.load_exercises()}
        assert loaded == {"a": 12.5, "b": 40}

    def test_append_sets_is_insert_only(self, store):
        store.append_sets([_set("1"), _set("2")])
        store.append_sets([_set("3", weight=62.5)])
        lines = store.sets_path.read_text().splitlines()
        assert len(lines) == 3
        assert [s.id for s in store.load_sets()] == ["1", "2", "3"]

    def test_append_nothing_creates_nothing(self, store):
        store.append_sets([])
        assert not store.sets_path.exists()

    def test_routines_roundtrip_with_targets(self, store):
        routine = Routine(id="r", name="Push", exercise_ids=["a", "b"], targets={"a": SetTarget(4, 6)})
        store.save_routines([routine])
        assert store.load_routines() == [routine]

    def test_save_routines_upserts_by_id(self, store):
        store.save_routines([Routine(id="r1", name="One"), Routine(id="r2", name="Two")])
        store.save_routines([Routine(id="r1", name="Uno")])
        assert [(r.id, r.name) for r in store.load_routines()] == [("r1", "Uno"), ("r2", "Two")]

    def test_delete_routine(self, store):
        store.save_routines([Routine(id="r1", name="One"), Routine(id="r2", name="Two")])
        store.delete_routine("r1")
        assert [r.id for r in store.load_routines()] == ["r2"]
        with pytest.raises(StorageError):
            store.delete_routine("r1")

    def test_settings_roundtrip(self, store):
        store.save_settings(UserSettings(volume_goals={"Chest": 12}, default_rest_time=120))
        data = json.loads(store.settings_path.read_text())
        assert data == {"volume_goals": {"Chest": 12}, "default_rest_time": 120}
        assert store.load_settings() == UserSettings({"Chest": 12}, 120)

    def test_users_are_isolated(self, temp_data_dir):
        alice = JsonStore(temp_data_dir, lambda: "alice")
        bob = JsonStore(temp_data_dir, lambda: "bob")
        alice.save_exercise(Exercise("a", "Curl", "Arms", 10))
        assert bob.load_exercises() == []

    def test_no_user_raises(self, temp_data_dir):
        store = JsonStore(temp_data_dir, lambda: None)
        with pytest.raises(NotSignedInError):
            store.load_exercises()
        with pytest.raises(StorageError):
            store.save_settings(UserSettings())

    def test_corrupt_json_raises_storage_error(self, store):
        store.exercises_path.parent.mkdir(parents=True)
        store.exercises_path.write_text("{not json")
        with pytest.raises(StorageError):
            store.load_exercises()

    def test_bad_set_line_reports_line_number(self, store):
        store.append_sets([_set("1")])
        with open(store.sets_path, "a") as f:
            f.write('{"id": "2"}\n')
        with pytest.raises(ValidationError, match="line 2"):
            store.load_sets()


class TestSerializers:
    def test_set_log_json_line(self):
        s = _set("x")
        assert json_line_to_set_log(set_log_to_json_line(s)) == s

    def test_set_log_defaults(self):
        s = dict_to_set_log({"id": "1", "exercise_id": "a", "date": "2024-06-05", "weight": 20, "reps": 8})
        assert s.target_reps == 8 and s.completed is True

    def test_set_log_bad_date(self):
        with pytest.raises(ValidationError):
            dict_to_set_log({"id": "1", "exercise_id": "a", "date": "yesterday", "weight": 20, "reps": 8})

    def test_routine_missing_targets_ok(self):
        r = dict_to_routine({"id": "r", "name": "R", "exercise_ids": ["a"]})
        assert r.targets == {}

    def test_routine_negative_target_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_routine({"id": "r", "name": "R", "targets": {"a": {"sets": -1, "reps": 10}}})

    def test_settings_unknown_group_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_settings({"volume_goals": {"Neck": 5}})


class TestUserResolution:
    def test_env_user_wins(self, monkeypatch):
        monkeypatch.setenv("PURELIFT_USER", "  carol ")
        assert local_user() == "carol"

    def test_default_store_honours_purelift_home(self, monkeypatch, temp_data_dir):
        monkeypatch.setenv("PURELIFT_HOME", str(temp_data_dir))
        store = get_default_store(user="dave")
        assert store.user_dir == temp_data_dir / "users" / "dave"
