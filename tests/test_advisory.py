"""
Tests for the advisory layer: payload decoders, fallbacks and the Gemini
REST client (requests.post is stubbed; no network access).
"""

import json

import pytest
import requests

from purelift.advisory.advisor import Advisor, AdvisoryError
from purelift.advisory.config import AdvisorConfig
from purelift.advisory.decoders import (
    coerce_muscle_group,
    decode_alternatives,
    decode_classification,
    decode_form_tips,
    decode_generated_routine,
)
from purelift.advisory.gemini import GeminiModel
from purelift.core.config import (
    EMPTY_COACH_INSIGHT,
    FALLBACK_COACH_INSIGHT,
    FALLBACK_FORM_TIPS,
    FALLBACK_ROUTINE_NAME,
)
from purelift.core.models import WeeklyVolume


class FakeModel:
    """Model backend returning canned values (or raising)."""

    def __init__(self, json_value=None, text="", error: Exception | None = None):
        self.json_value = json_value
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text

    def generate_json(self, prompt: str, schema: dict):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.json_value


class FakeResponse:
    def __init__(self, payload, status: int = 200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def _gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


class TestDecoders:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Back", "Back"),
            ("legs", "Legs"),
            ("Back (Posterior Chain)", "Back"),
            ("Neck", "Chest"),
            (None, "Chest"),
            (3, "Chest"),
        ],
    )
    def test_coerce_muscle_group(self, raw, expected):
        assert coerce_muscle_group(raw) == expected

    def test_classification_full(self):
        c = decode_classification(
            {"name": "Incline Dumbbell Press", "muscleGroup": "Chest", "suggestedWeight": 22},
            "incline db",
        )
        assert (c.name, c.muscle_group, c.suggested_weight) == ("Incline Dumbbell Press", "Chest", 22.0)

    def test_classification_defaults(self):
        c = decode_classification({"suggestedWeight": "heavy"}, "mystery lift")
        assert (c.name, c.muscle_group, c.suggested_weight) == ("mystery lift", "Chest", 20.0)

    def test_classification_zero_weight_kept(self):
        assert decode_classification({"name": "Pull-up", "suggestedWeight": 0}, "x").suggested_weight == 0.0

    def test_classification_wrong_type(self):
        with pytest.raises(AdvisoryError):
            decode_classification(["not", "an", "object"], "x")

    def test_alternatives_skip_nameless(self):
        alts = decode_alternatives([{"name": "Dips", "reason": "Same push"}, {"reason": "?"}, "junk", {"name": "Push-ups"}])
        assert [(a.name, a.reason) for a in alts] == [("Dips", "Same push"), ("Push-ups", "")]

    def test_form_tips_keep_strings(self):
        assert decode_form_tips(["Brace", "", 4, " Breathe "]) == ["Brace", "Breathe"]

    def test_generated_routine_defaults(self):
        routine = decode_generated_routine({
            "exercises": [
                {"name": "Squat", "muscleGroup": "LEGS", "suggestedWeight": 80, "targetSets": 5, "targetReps": 5},
                {"name": "Curl", "targetSets": 0, "targetReps": "many"},
                {"muscleGroup": "Arms"},
            ],
        })
        assert routine.routine_name == FALLBACK_ROUTINE_NAME
        assert len(routine.exercises) == 2
        squat, curl = routine.exercises
        assert (squat.muscle_group, squat.target_sets, squat.target_reps) == ("Legs", 5, 5)
        assert (curl.muscle_group, curl.suggested_weight, curl.target_sets, curl.target_reps) == ("Chest", 20.0, 3, 10)


# ---------------------------------------------------------------------------
# Advisor fallbacks
# ---------------------------------------------------------------------------


class TestAdvisorOffline:
    """No model configured: fallbacks without warnings."""

    def test_fallbacks(self, recwarn):
        advisor = Advisor()
        c = advisor.classify_exercise("  cable fly ")
        assert (c.name, c.muscle_group, c.suggested_weight) == ("cable fly", "Chest", 20.0)
        assert advisor.suggest_alternatives("Bench", "Chest") == []
        assert advisor.get_form_tips("Bench") == list(FALLBACK_FORM_TIPS)
        assert advisor.generate_routine("legs") is None
        assert advisor.get_coach_insight([]) == FALLBACK_COACH_INSIGHT
        assert len(recwarn) == 0


class TestAdvisorOnline:
    def test_failure_warns_and_falls_back(self):
        advisor = Advisor(FakeModel(error=AdvisoryError("boom")))
        with pytest.warns(UserWarning, match="purelift: exercise classification failed"):
            c = advisor.classify_exercise("bench")
        assert c.name == "bench" and c.muscle_group == "Chest"

    def test_unexpected_exception_also_falls_back(self):
        advisor = Advisor(FakeModel(error=RuntimeError("socket closed")))
        with pytest.warns(UserWarning):
            assert advisor.suggest_alternatives("Bench", "Chest") == []

    def test_malformed_payload_falls_back(self):
        advisor = Advisor(FakeModel(json_value={"unexpected": True}))
        with pytest.warns(UserWarning):
            assert advisor.get_form_tips("Squat") == list(FALLBACK_FORM_TIPS)

    def test_empty_tips_use_canned(self):
        assert Advisor(FakeModel(json_value=[])).get_form_tips("Squat") == list(FALLBACK_FORM_TIPS)

    def test_classification_success(self):
        model = FakeModel(json_value={"name": "Romanian Deadlift", "muscleGroup": "Legs", "suggestedWeight": 70})
        c = Advisor(model).classify_exercise("rdl")
        assert (c.name, c.muscle_group, c.suggested_weight) == ("Romanian Deadlift", "Legs", 70.0)
        assert '"rdl"' in model.prompts[0]

    def test_coach_insight_uses_volume_summary(self):
        model = FakeModel(text="Great chest week.")
        volumes = [WeeklyVolume("Chest", 4, 15), WeeklyVolume("Back", 0, 12)]
        assert Advisor(model).get_coach_insight(volumes) == "Great chest week."
        assert "Chest: 4/15 sets, Back: 0/12 sets" in model.prompts[0]

    def test_coach_insight_empty_text(self):
        assert Advisor(FakeModel(text="")).get_coach_insight([]) == EMPTY_COACH_INSIGHT


# ---------------------------------------------------------------------------
# Gemini client
# ---------------------------------------------------------------------------


class TestGeminiModel:
    CFG = AdvisorConfig(api_key="test-key", model="gemini-test", timeout=5)

    def test_generate_json_request_shape(self, monkeypatch):
        calls = []

        def fake_post(url, headers=None, json=None, timeout=None):
            calls.append((url, headers, json, timeout))
            return FakeResponse(_gemini_payload('[{"name": "Dips", "reason": "r"}]'))

        monkeypatch.setattr(requests, "post", fake_post)
        value = GeminiModel(self.CFG).generate_json("prompt", {"type": "ARRAY"})

        assert value == [{"name": "Dips", "reason": "r"}]
        url, headers, body, timeout = calls[0]
        assert url.endswith("/models/gemini-test:generateContent")
        assert headers == {"x-goog-api-key": "test-key"}
        assert body["contents"][0]["parts"][0]["text"] == "prompt"
        assert body["generationConfig"]["responseMimeType"] == "application/json"
        assert body["generationConfig"]["responseSchema"] == {"type": "ARRAY"}
        assert timeout == 5

    def test_http_error_raises_advisory_error(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse({}, status=500))
        with pytest.raises(AdvisoryError):
            GeminiModel(self.CFG).generate_text("hi")

    def test_connection_error_raises_advisory_error(self, monkeypatch):
        def fail(*a, **kw):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(requests, "post", fail)
        with pytest.raises(AdvisoryError):
            GeminiModel(self.CFG).generate_text("hi")

    def test_invalid_json_raises_advisory_error(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(_gemini_payload("not json")))
        with pytest.raises(AdvisoryError):
            GeminiModel(self.CFG).generate_json("hi", {})

    def test_missing_candidates_raises_advisory_error(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse({"candidates": []}))
        with pytest.raises(AdvisoryError):
            GeminiModel(self.CFG).generate_text("hi")

    def test_requires_api_key(self):
        with pytest.raises(AdvisoryError):
            GeminiModel(AdvisorConfig(api_key=None))

    def test_advisor_end_to_end(self, monkeypatch):
        payload = {"name": "Face Pull", "muscleGroup": "Shoulders", "suggestedWeight": 15}
        monkeypatch.setattr(
            requests, "post", lambda *a, **kw: FakeResponse(_gemini_payload(json.dumps(payload)))
        )
        c = Advisor(GeminiModel(self.CFG)).classify_exercise("face pulls")
        assert (c.name, c.muscle_group) == ("Face Pull", "Shoulders")


class TestAdvisorConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.setenv("PURELIFT_MODEL", "gemini-x")
        monkeypatch.setenv("PURELIFT_AI_TIMEOUT", "12")
        cfg = AdvisorConfig.from_env()
        assert (cfg.api_key, cfg.model, cfg.timeout, cfg.enabled) == ("g-key", "gemini-x", 12.0, True)

    def test_offline_without_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        assert Advisor.from_env().online is False
