"""
Configuration constants for the progressive-overload model.

All adjustable parameters are centralized here for easy tuning.
User overrides are read from YAML by core/engine/config_loader.py;
anything missing there falls back to the values below.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# ROUTINE TARGETS
# =============================================================================

DEFAULT_TARGET_SETS: Final[int] = 3  # Sets per exercise when a routine has no target entry
DEFAULT_TARGET_REPS: Final[int] = 10  # Reps per set when a routine has no target entry

# =============================================================================
# PROGRESSIVE OVERLOAD
# =============================================================================

WEIGHT_INCREMENT_KG: Final[float] = 2.5  # Added to the heaviest set after a clean session
DELOAD_FACTOR: Final[float] = 0.90  # Reference weight multiplier after a zero-completion session
WEIGHT_DECIMALS: Final[int] = 1  # Reference weights are stored rounded to this many decimals

# =============================================================================
# VOLUME & REST
# =============================================================================

DEFAULT_VOLUME_GOAL: Final[int] = 15  # Weekly hard sets per muscle group
DEFAULT_REST_SECONDS: Final[int] = 90

# =============================================================================
# ADVISORY FALLBACKS
# =============================================================================

FALLBACK_MUSCLE_GROUP: Final[str] = "Chest"
FALLBACK_SUGGESTED_WEIGHT: Final[float] = 20.0
FALLBACK_COACH_INSIGHT: Final[str] = (
    "Focus on progressive overload and hitting your weekly volume goals."
)
EMPTY_COACH_INSIGHT: Final[str] = "Keep pushing, consistency is key to growth."
FALLBACK_FORM_TIPS: Final[tuple[str, ...]] = (
    "Control the eccentric: lower the weight over two to three seconds.",
    "Brace your core before every rep.",
    "Use a full range of motion you can own.",
    "Stop the set when form breaks down, not when you collapse.",
)
FALLBACK_ROUTINE_NAME: Final[str] = "AI Routine"

# Progress chart window (session-days)
PROGRESS_POINTS: Final[int] = 7


@dataclass(frozen=True)
class ProgressionRules:
    """
    Tunable rule set shared by the session builder and overload resolver.

    Built from the constants above, optionally overridden by YAML
    (see core/engine/config_loader.load_progression_rules).
    """

    target_sets: int = DEFAULT_TARGET_SETS
    target_reps: int = DEFAULT_TARGET_REPS
    weight_increment_kg: float = WEIGHT_INCREMENT_KG
    deload_factor: float = DELOAD_FACTOR
    weight_decimals: int = WEIGHT_DECIMALS
    volume_goal: int = DEFAULT_VOLUME_GOAL
    rest_seconds: int = DEFAULT_REST_SECONDS

    def __post_init__(self) -> None:
        if self.target_sets < 0 or self.target_reps < 0:
            raise ValueError("default targets must be non-negative")
        if self.deload_factor < 0:
            raise ValueError("deload_factor must be non-negative")
        if self.weight_decimals < 0:
            raise ValueError("weight_decimals must be non-negative")
        if self.volume_goal < 0:
            raise ValueError("volume_goal must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
