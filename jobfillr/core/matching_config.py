from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from jobfillr.core.config import settings

_MATCHING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_MATCHING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "matching.yaml"


def _config_path() -> Path:
    if settings.matching_config_path:
        return Path(settings.matching_config_path)
    return _DEFAULT_MATCHING_CONFIG_PATH


def get_matching_config() -> dict[str, Any]:
    """Load matcher tunables from config/matching.yaml and cache them."""
    global _MATCHING_CONFIG_CACHE

    if _MATCHING_CONFIG_CACHE is not None:
        return _MATCHING_CONFIG_CACHE

    path = _config_path()
    if not path.exists():
        raise RuntimeError(
            f"Matching config not found at '{path}'. "
            "Expected file: config/matching.yaml"
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read matching config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in matching config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid matching config '{path}': expected a top-level mapping.")

    _MATCHING_CONFIG_CACHE = parsed
    return _MATCHING_CONFIG_CACHE


def get_matching_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'fuzzy.threshold'."""
    if not path:
        return default

    current: Any = get_matching_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
