"""
YAML → typed config loader.

Loads progression constants from config.yaml (bundled with the package)
and optionally merges user overrides from $PURELIFT_HOME/config.yaml
(default ~/.purelift/config.yaml).

Usage:
    from purelift.core.engine.config_loader import load_progression_rules
    rules = load_progression_rules()
    rules.weight_increment_kg  # 2.5 unless overridden

If a YAML file cannot be parsed, a warning is emitted and the file is
ignored; lookups then fall back to the Python defaults from config.py.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import ProgressionRules

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} (with a warning) on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"purelift: ignoring config file {path} ({exc})", stacklevel=2)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"purelift: ignoring config file {path} (not a mapping)", stacklevel=2)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _pick(section: dict, key: str, cast: type, default: Any) -> Any:
    """Read section[key] coerced with *cast*, or *default* if absent/invalid."""
    if key not in section:
        return default
    try:
        return cast(section[key])
    except (TypeError, ValueError):
        warnings.warn(
            f"purelift: invalid config value {key}={section[key]!r}; using {default!r}",
            stacklevel=3,
        )
        return default


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_home() -> Path:
    """Return the purelift data directory ($PURELIFT_HOME or ~/.purelift)."""
    env = os.environ.get("PURELIFT_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".purelift"


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled config.yaml, or None if not found."""
    ref = importlib.resources.files("purelift").joinpath("data").joinpath("config.yaml")
    if not ref.is_file():
        return None
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_yaml_path(data_home: Path | None = None) -> Path | None:
    """Return <data home>/config.yaml if it exists, else None."""
    p = (data_home or get_data_home()) / "config.yaml"
    return p if p.exists() else None


def load_model_config(data_home: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/purelift/data/config.yaml
    2. User override at <data home>/config.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path(data_home)
    if user is not None:
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def rules_from_config(config: dict[str, Any]) -> ProgressionRules:
    """Build ProgressionRules from a merged config dict."""
    base = ProgressionRules()
    progression = config.get("progression") or {}
    defaults = config.get("defaults") or {}
    if not isinstance(progression, dict):
        progression = {}
    if not isinstance(defaults, dict):
        defaults = {}

    try:
        return ProgressionRules(
            target_sets=_pick(defaults, "target_sets", int, base.target_sets),
            target_reps=_pick(defaults, "target_reps", int, base.target_reps),
            weight_increment_kg=_pick(progression, "weight_increment_kg", float, base.weight_increment_kg),
            deload_factor=_pick(progression, "deload_factor", float, base.deload_factor),
            weight_decimals=_pick(progression, "weight_decimals", int, base.weight_decimals),
            volume_goal=_pick(defaults, "volume_goal", int, base.volume_goal),
            rest_seconds=_pick(defaults, "rest_seconds", int, base.rest_seconds),
        )
    except ValueError as exc:
        warnings.warn(f"purelift: invalid progression config ({exc}); using defaults", stacklevel=2)
        return base


def load_progression_rules(data_home: Path | None = None) -> ProgressionRules:
    """Load ProgressionRules from bundled + user YAML."""
    return rules_from_config(load_model_config(data_home))
