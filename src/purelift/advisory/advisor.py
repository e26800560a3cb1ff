"""
Advisory Gateway.

Wraps a text model behind five calls that never raise.  Every failure
(transport error, malformed payload, missing model) yields a fixed
fallback so a workout is never blocked by the AI features.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Protocol, TypeVar

from ..core.config import (
    EMPTY_COACH_INSIGHT,
    FALLBACK_COACH_INSIGHT,
    FALLBACK_FORM_TIPS,
    FALLBACK_MUSCLE_GROUP,
    FALLBACK_SUGGESTED_WEIGHT,
)
from ..core.models import (
    Alternative,
    ExerciseClassification,
    GeneratedRoutine,
    WeeklyVolume,
)
from . import prompts
from .config import AdvisorConfig
from .decoders import (
    AdvisoryError,
    decode_alternatives,
    decode_classification,
    decode_form_tips,
    decode_generated_routine,
)
from .gemini import GeminiModel

__all__ = ["AdviceModel", "Advisor", "AdvisoryError"]

T = TypeVar("T")


class AdviceModel(Protocol):
    """What the advisor needs from a model backend."""

    def generate_text(self, prompt: str) -> str: ...

    def generate_json(self, prompt: str, schema: dict[str, Any]) -> Any: ...


def fallback_classification(user_input: str) -> ExerciseClassification:
    return ExerciseClassification(
        name=user_input.strip() or user_input,
        muscle_group=FALLBACK_MUSCLE_GROUP,  # type: ignore[arg-type]
        suggested_weight=FALLBACK_SUGGESTED_WEIGHT,
    )


class Advisor:
    """
    Advisory Gateway over an optional model.

    With model=None every call returns its fallback without a warning;
    with a model, a failed call warns and then falls back.
    """

    def __init__(self, model: AdviceModel | None = None) -> None:
        self.model = model

    @classmethod
    def from_env(cls) -> "Advisor":
        """Advisor backed by Gemini when an API key is configured, else offline."""
        cfg = AdvisorConfig.from_env()
        return cls(GeminiModel(cfg) if cfg.enabled else None)

    @property
    def online(self) -> bool:
        return self.model is not None

    def _attempt(self, what: str, call: Callable[[AdviceModel], T], fallback: T) -> T:
        if self.model is None:
            return fallback
        try:
            return call(self.model)
        except Exception as exc:  # any backend failure degrades to the fallback
            warnings.warn(f"purelift: {what} failed ({exc}); using fallback", stacklevel=3)
            return fallback

    def classify_exercise(self, user_input: str) -> ExerciseClassification:
        """Name, muscle group and a starting weight for free-text input."""
        return self._attempt(
            "exercise classification",
            lambda m: decode_classification(
                m.generate_json(prompts.classification_prompt(user_input), prompts.CLASSIFICATION_SCHEMA),
                user_input,
            ),
            fallback_classification(user_input),
        )

    def suggest_alternatives(self, exercise_name: str, muscle_group: str) -> list[Alternative]:
        return self._attempt(
            "alternative suggestion",
            lambda m: decode_alternatives(
                m.generate_json(
                    prompts.alternatives_prompt(exercise_name, muscle_group),
                    prompts.ALTERNATIVES_SCHEMA,
                )
            ),
            [],
        )

    def get_form_tips(self, exercise_name: str) -> list[str]:
        """Form cues; the canned generic tips when the model gives none."""
        tips = self._attempt(
            "form tips",
            lambda m: decode_form_tips(
                m.generate_json(prompts.form_tips_prompt(exercise_name), prompts.FORM_TIPS_SCHEMA)
            ),
            [],
        )
        return tips or list(FALLBACK_FORM_TIPS)

    def generate_routine(self, request: str) -> GeneratedRoutine | None:
        """
        Routine draft for a free-text request.

        Returns None when no model is available or the call failed; an
        empty routine is never invented.
        """
        return self._attempt(
            "routine generation",
            lambda m: decode_generated_routine(
                m.generate_json(prompts.routine_prompt(request), prompts.ROUTINE_SCHEMA)
            ),
            None,
        )

    def get_coach_insight(self, volumes: list[WeeklyVolume]) -> str:
        """Short display-only comment on this week's volume."""
        text = self._attempt(
            "coach insight",
            lambda m: m.generate_text(prompts.coach_insight_prompt(volumes)),
            FALLBACK_COACH_INSIGHT,
        )
        return text or EMPTY_COACH_INSIGHT
