"""User directories and options persistence."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

_DEFAULT_LOG_LEVEL = "INFO"
_VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
_DEFAULT_SAVE_DEBOUNCE_MS = 1000
_DEFAULT_EVENT_CHANCE_MULTIPLIER = 1.0


@dataclass(slots=True)
class GameConfig:
    log_level: str = _DEFAULT_LOG_LEVEL
    save_debounce_ms: int = _DEFAULT_SAVE_DEBOUNCE_MS
    event_chance_multiplier: float = _DEFAULT_EVENT_CHANCE_MULTIPLIER


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "TrampFreighter"
        return Path.home() / "TrampFreighter"
    return Path.home() / ".config" / "tramp_freighter"


def get_default_config_path() -> Path:
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    return get_user_data_dir() / "saves"


def get_log_dir() -> Path:
    return get_user_data_dir() / "logs"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _VALID_LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_debounce(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return _DEFAULT_SAVE_DEBOUNCE_MS


def _normalize_chance_multiplier(value: object) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
        return float(value)
    return _DEFAULT_EVENT_CHANCE_MULTIPLIER


def _normalize(raw: dict) -> GameConfig:
    return GameConfig(
        log_level=_normalize_log_level(raw.get("log_level")),
        save_debounce_ms=_normalize_debounce(raw.get("save_debounce_ms")),
        event_chance_multiplier=_normalize_chance_multiplier(raw.get("event_chance_multiplier")),
    )


def load_config(path: Path | None = None) -> GameConfig:
    """Load config from disk; anything missing or invalid falls back to defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return GameConfig()
    if not isinstance(raw, dict):
        return GameConfig()
    return _normalize(raw)


def save_config(config: GameConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
