"""
Minimal REST client for the Generative Language API (generateContent).

Only the two call shapes the advisor needs: free text, and JSON constrained
by a response schema.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests

from .config import AdvisorConfig
from .decoders import AdvisoryError

API_ROOT = "https://generativelanguage.googleapis.com/v1beta"


class GeminiModel:
    """Simple HTTP client for one Gemini model."""

    def __init__(self, cfg: Optional[AdvisorConfig] = None) -> None:
        self.cfg = cfg or AdvisorConfig.from_env()
        if not self.cfg.api_key:
            raise AdvisoryError("Missing GEMINI_API_KEY (or GOOGLE_API_KEY)")

    @property
    def url(self) -> str:
        return f"{API_ROOT}/models/{self.cfg.model}:generateContent"

    def _generate(self, prompt: str, generation_config: Dict[str, Any]) -> str:
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.cfg.temperature, **generation_config},
        }
        try:
            resp = requests.post(
                self.url,
                headers={"x-goog-api-key": self.cfg.api_key or ""},
                json=body,
                timeout=self.cfg.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise AdvisoryError(f"Gemini request failed: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise AdvisoryError(f"Unexpected Gemini response shape: {e}") from e
        return text

    def generate_text(self, prompt: str) -> str:
        return self._generate(prompt, {}).strip()

    def generate_json(self, prompt: str, schema: Dict[str, Any]) -> Any:
        """Generate a JSON value matching *schema*; returns the parsed value."""
        text = self._generate(
            prompt,
            {"responseMimeType": "application/json", "responseSchema": schema},
        )
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise AdvisoryError(f"Gemini returned invalid JSON: {e}") from e
