"""
Advisory Gateway: AI exercise classification, alternatives, form tips,
routine generation and coach insight, with fixed fallbacks.
"""

from .advisor import Advisor, AdvisoryError
from .config import AdvisorConfig

__all__ = [
    "Advisor",
    "AdvisoryError",
    "AdvisorConfig",
]
