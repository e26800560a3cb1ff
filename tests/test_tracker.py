"""
Tracker integration tests: load, live session, finish and routine edits
against a JsonStore in a temporary directory.
"""

import json
import tempfile
from pathlib import Path

import pytest

from purelift.advisory.advisor import Advisor
from purelift.core.config import FALLBACK_COACH_INSIGHT, ProgressionRules
from purelift.core.models import SetTarget
from purelift.io.gateway import StorageError
from purelift.io.store import JsonStore
from purelift.tracker import NoActiveSessionError, Tracker


class ScriptedModel:
    """Advice model answering JSON prompts from a queue."""

    def __init__(self, *json_values):
        self.json_values = list(json_values)

    def generate_text(self, prompt: str) -> str:
        return "Nice week."

    def generate_json(self, prompt: str, schema: dict):
        return self.json_values.pop(0)


class FlakyStore(JsonStore):
    """JsonStore whose selected write methods fail."""

    def __init__(self, *args, fail: tuple[str, ...] = (), **kwargs):
        super().__init__(*args, **kwargs)
        self.fail = set(fail)

    def save_exercise(self, exercise):
        if "save_exercise" in self.fail:
            raise StorageError("disk full")
        super().save_exercise(exercise)

    def append_sets(self, sets):
        if "append_sets" in self.fail:
            raise StorageError("disk full")
        super().append_sets(sets)


@pytest.fixture
def temp_data_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def tracker(temp_data_dir):
    t = Tracker(JsonStore(temp_data_dir, lambda: "alice"))
    t.load()
    return t


def _complete_exercise(session, exercise_id: str) -> None:
    for s in session.sets_for(exercise_id):
        session.toggle_complete(s.id)


class TestLoad:
    def test_first_load_seeds(self, tracker):
        assert len(tracker.exercises) == 18
        assert [r.id for r in tracker.routines] == ["ppl-push", "ppl-pull", "ppl-legs"]
        assert tracker.active_routine_id == "ppl-push"
        assert tracker.settings.default_rest_time == 90

    def test_no_seed_leaves_empty(self, temp_data_dir):
        t = Tracker(JsonStore(temp_data_dir, lambda: "bob"))
        t.load(seed=False)
        assert t.exercises == [] and t.routines == []
        assert t.active_routine_id is None

    def test_weekly_volume_covers_all_groups(self, tracker):
        volumes = tracker.weekly_volume()
        assert [v.muscle_group for v in volumes] == ["Chest", "Back", "Legs", "Shoulders", "Arms", "Core"]
        assert all(v.count == 0 and v.goal == 15 for v in volumes)

    def test_coach_insight_offline_fallback(self, tracker):
        assert tracker.coach_insight() == FALLBACK_COACH_INSIGHT

    def test_coach_insight_from_model(self, temp_data_dir):
        t = Tracker(JsonStore(temp_data_dir, lambda: "alice"), advisor=Advisor(ScriptedModel()))
        t.load()
        assert t.coach_insight() == "Nice week."


class TestSession:
    def test_start_from_active_routine(self, tracker):
        session = tracker.start_session()
        assert session.routine_id == "ppl-push"
        assert len(session.sets_for("bench-press")) == 4
        assert len(session) == 19

    def test_start_unknown_routine(self, tracker):
        with pytest.raises(KeyError):
            tracker.start_session("nope")

    def test_session_ops_need_session(self, tracker):
        with pytest.raises(NoActiveSessionError):
            tracker.finish_session()
        with pytest.raises(NoActiveSessionError):
            tracker.add_to_session("curls")

    def test_finish_progresses_and_persists_completed_only(self, tracker):
        session = tracker.start_session("ppl-push")
        bench = session.sets_for("bench-press")
        session.update_set(bench[-1].id, "weight", 62.5)
        _complete_exercise(session, "bench-press")
        session.toggle_complete(session.sets_for("overhead-press")[0].id)

        report = tracker.finish_session()

        assert report.ok
        assert report.persisted == 5
        assert tracker.session is None
        assert tracker.exercise("bench-press").reference_weight == 65.0
        assert tracker.exercise("overhead-press").reference_weight == 40.0
        assert tracker.exercise("dips").reference_weight == 0.0
        assert tracker.exercise("incline-dumbbell-press").reference_weight == 19.8
        assert len(tracker.sets) == 5

        chest = next(v for v in tracker.weekly_volume() if v.muscle_group == "Chest")
        assert chest.count == 4

    def test_finish_is_best_effort(self, temp_data_dir):
        t = Tracker(FlakyStore(temp_data_dir, lambda: "alice", fail=("save_exercise",)))
        t.load()
        session = t.start_session("ppl-push")
        _complete_exercise(session, "bench-press")

        report = t.finish_session()

        assert not report.ok
        assert report.updated == []
        assert report.persisted == 4
        assert len(t.sets) == 4
        assert t.exercise("bench-press").reference_weight == 60.0
        assert t.session is None

    def test_failed_append_still_updates_weights(self, temp_data_dir):
        t = Tracker(FlakyStore(temp_data_dir, lambda: "alice", fail=("append_sets",)))
        t.load()
        _complete_exercise(t.start_session("ppl-push"), "bench-press")

        report = t.finish_session()

        assert report.persisted == 0
        assert len(report.failures) == 1
        assert t.sets == []
        assert t.exercise("bench-press").reference_weight == 62.5

    def test_corrupt_catalog_does_not_stop_finish(self, tracker):
        store = tracker.gateway
        _complete_exercise(tracker.start_session("ppl-push"), "bench-press")
        records = json.loads(store.exercises_path.read_text())
        records[-1]["muscle_group"] = "Nope"
        store.exercises_path.write_text(json.dumps(records))

        report = tracker.finish_session()

        assert not report.ok
        assert report.updated == []
        assert report.persisted == 4
        assert len(store.sets_path.read_text().splitlines()) == 4
        assert any("reload" in f for f in report.failures)
        assert tracker.session is None

    def test_abandon_persists_nothing(self, tracker):
        session = tracker.start_session()
        _complete_exercise(session, "bench-press")
        tracker.abandon_session()
        tracker.load()
        assert tracker.sets == []
        assert tracker.exercise("bench-press").reference_weight == 60.0

    def test_listener_fires_on_completion(self, tracker):
        done = []
        tracker.on_set_completed(done.append)
        session = tracker.start_session()
        first = session.sets[0]
        session.toggle_complete(first.id)
        session.toggle_complete(first.id)
        assert done == [first]

    def test_add_to_session_reuses_by_name(self, tracker):
        tracker.start_session()
        exercise = tracker.add_to_session("  bench press ")
        assert exercise.id == "bench-press"
        assert len(tracker.session.sets_for("bench-press")) == 4 + 3
        assert len(tracker.exercises) == 18

    def test_add_to_session_creates_offline(self, tracker):
        tracker.start_session()
        exercise = tracker.add_to_session("Cable Fly")
        assert (exercise.name, exercise.muscle_group, exercise.reference_weight) == ("Cable Fly", "Chest", 20.0)
        added = tracker.session.sets_for(exercise.id)
        assert [(s.reps, s.target_reps, s.weight) for s in added] == [(10, 10, 20.0)] * 3
        tracker.load(seed=False)
        assert tracker.find_exercise("cable fly") is not None

    def test_swap_keeps_reps_and_state(self, tracker):
        session = tracker.start_session()
        first = session.sets_for("bench-press")[0]
        session.toggle_complete(first.id)
        replacement = tracker.swap_exercise("bench-press", "Dips")
        assert replacement.id == "dips"
        assert session.sets_for("bench-press") == []
        swapped = session.sets[0]
        assert (swapped.exercise_id, swapped.weight, swapped.reps, swapped.completed) == ("dips", 0.0, 6, True)


class TestRoutines:
    def test_create_and_edit(self, tracker):
        routine = tracker.create_routine("  Arms day ")
        assert routine.name == "Arms day"
        tracker.add_to_routine(routine.id, "bicep-curls")
        tracker.add_to_routine(routine.id, "bicep-curls")
        tracker.set_target(routine.id, "bicep-curls", reps=12)

        tracker.load()
        stored = tracker.routine(routine.id)
        assert stored.exercise_ids == ["bicep-curls"]
        assert stored.targets["bicep-curls"] == SetTarget(3, 12)

    def test_add_unknown_exercise(self, tracker):
        with pytest.raises(KeyError):
            tracker.add_to_routine("ppl-push", "nope")

    def test_remove_and_rename(self, tracker):
        tracker.remove_from_routine("ppl-push", "dips")
        tracker.rename_routine("ppl-push", "Push")
        tracker.load()
        push = tracker.routine("ppl-push")
        assert push.name == "Push"
        assert "dips" not in push.exercise_ids

    def test_delete_active_routine_moves_selection(self, tracker):
        tracker.delete_routine("ppl-push")
        assert tracker.active_routine_id == "ppl-pull"
        tracker.load()
        assert [r.id for r in tracker.routines] == ["ppl-pull", "ppl-legs"]
        assert tracker.exercise("bench-press")

    def test_custom_exercise_into_routine(self, tracker):
        exercise = tracker.add_custom_exercise("Hammer Curl", routine_id="ppl-pull")
        assert tracker.routine("ppl-pull").exercise_ids[-1] == exercise.id

    def test_generate_routine(self, temp_data_dir):
        model = ScriptedModel({
            "routineName": "Upper Blast",
            "exercises": [
                {"name": "bench press", "muscleGroup": "Chest", "suggestedWeight": 999, "targetSets": 5, "targetReps": 5},
                {"name": "Cable Row", "muscleGroup": "Back", "suggestedWeight": 45, "targetSets": 3, "targetReps": 12},
            ],
        })
        t = Tracker(JsonStore(temp_data_dir, lambda: "alice"), advisor=Advisor(model))
        t.load()

        routine = t.generate_routine("upper body")

        assert routine.name == "Upper Blast"
        assert routine.exercise_ids[0] == "bench-press"
        assert t.exercise("bench-press").reference_weight == 60.0
        row = t.exercise(routine.exercise_ids[1])
        assert (row.name, row.reference_weight) == ("Cable Row", 45.0)
        assert routine.targets[row.id] == SetTarget(3, 12)

        t.load()
        assert t.routine(routine.id).name == "Upper Blast"

    def test_generate_routine_offline(self, tracker):
        assert tracker.generate_routine("legs") is None
        assert len(tracker.routines) == 3


class TestSettings:
    def test_set_goal_persists_both_fields(self, tracker):
        tracker.update_settings(default_rest_time=120)
        tracker.set_volume_goal("Back", 20)
        tracker.load()
        assert tracker.settings.volume_goals == {"Back": 20}
        assert tracker.settings.default_rest_time == 120
        back = next(v for v in tracker.weekly_volume() if v.muscle_group == "Back")
        assert back.goal == 20

    def test_unknown_group_rejected(self, tracker):
        with pytest.raises(ValueError):
            tracker.set_volume_goal("Neck", 5)

    def test_rules_drive_default_rest(self, temp_data_dir):
        t = Tracker(JsonStore(temp_data_dir, lambda: "alice"), rules=ProgressionRules(rest_seconds=60))
        t.load()
        assert t.settings.default_rest_time == 60
