"""
Prompt builders and JSON response schemas for each advisory call.

Schemas use the Generative Language API's OpenAPI subset (uppercase type
names) and are sent as generationConfig.responseSchema.
"""

from typing import Any

from ..core.models import MUSCLE_GROUPS, WeeklyVolume
from ..core.volume import volume_summary

COACH_NAME = "PureCoach"

_MUSCLE_GROUP_ENUM: dict[str, Any] = {
    "type": "STRING",
    "enum": list(MUSCLE_GROUPS),
    "description": "The primary muscle group targeted",
}

CLASSIFICATION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING", "description": "Corrected formal name of the exercise"},
        "muscleGroup": _MUSCLE_GROUP_ENUM,
        "suggestedWeight": {"type": "NUMBER", "description": "Suggested starting weight in kg"},
    },
    "required": ["name", "muscleGroup", "suggestedWeight"],
}

ALTERNATIVES_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "reason": {"type": "STRING"},
        },
        "required": ["name", "reason"],
    },
}

FORM_TIPS_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {"type": "STRING"},
}

ROUTINE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "routineName": {"type": "STRING"},
        "exercises": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "muscleGroup": _MUSCLE_GROUP_ENUM,
                    "suggestedWeight": {"type": "NUMBER"},
                    "targetSets": {"type": "INTEGER"},
                    "targetReps": {"type": "INTEGER"},
                },
                "required": ["name", "muscleGroup", "suggestedWeight", "targetSets", "targetReps"],
            },
        },
    },
    "required": ["routineName", "exercises"],
}


def classification_prompt(user_input: str) -> str:
    return (
        f'Analyze this exercise input: "{user_input}". '
        f"Categorize it into one of these muscle groups: {', '.join(MUSCLE_GROUPS)}. "
        "Provide a suggested starting weight in kg for an intermediate lifter."
    )


def alternatives_prompt(exercise_name: str, muscle_group: str) -> str:
    return (
        f'The user is at the gym and the machine for "{exercise_name}" ({muscle_group}) '
        "is unavailable. Suggest 3 direct alternatives targeting the same muscle group. "
        "For each, give the name and a very brief reason why it's a good swap."
    )


def form_tips_prompt(exercise_name: str) -> str:
    return (
        f'Give 3 to 5 short, concrete form cues for "{exercise_name}". '
        "One sentence each, no numbering."
    )


def routine_prompt(request: str) -> str:
    return (
        f"Design a gym routine for this request: {request!r}. "
        f"Use only these muscle groups: {', '.join(MUSCLE_GROUPS)}. "
        "For each exercise give a suggested working weight in kg for an intermediate "
        "lifter plus target sets and reps. Keep it to 4-8 exercises and give the "
        "routine a short name."
    )


def coach_insight_prompt(volumes: list[WeeklyVolume]) -> str:
    return (
        f'You are an expert bodybuilding coach named "{COACH_NAME}". '
        f"Based on this week's volume: {volume_summary(volumes)}, give a very short "
        "(max 2 sentences), encouraging, and professional insight. Focus on what's "
        "missing or congratulate on high volume. Use a direct, minimalist tone."
    )
