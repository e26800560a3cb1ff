from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT = 30.0


@dataclass
class AdvisorConfig:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    temperature: float = 0.4

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def from_env() -> "AdvisorConfig":
        return AdvisorConfig(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            model=os.getenv("PURELIFT_MODEL") or DEFAULT_MODEL,
            timeout=float(os.getenv("PURELIFT_AI_TIMEOUT") or DEFAULT_TIMEOUT),
        )
