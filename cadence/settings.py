"""Timer defaults with JSON persistence.

Settings are stored at:
    ~/.cadence/settings.json

Usage::

    settings = load_settings()
    settings.duration = 90.0
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / ".cadence"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """Defaults used by ``Timer.from_settings`` and the console runner."""

    # ── timer ─────────────────────────────────────────────────────────
    duration: float = 60.0                 # seconds
    repeats: bool = False
    autostart: bool = True

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"


def _is_valid(settings: Settings) -> bool:
    valid = True
    duration = settings.duration
    if (
        isinstance(duration, bool)
        or not isinstance(duration, (int, float))
        or not math.isfinite(duration)
        or duration <= 0
    ):
        logger.warning("invalid duration %r in %s", duration, SETTINGS_PATH)
        valid = False
    for name in ("repeats", "autostart"):
        value = getattr(settings, name)
        if not isinstance(value, bool):
            logger.warning("invalid %s %r in %s (expected true/false)",
                           name, value, SETTINGS_PATH)
            valid = False
    if not isinstance(settings.log_level, str):
        logger.warning("invalid log_level %r in %s", settings.log_level, SETTINGS_PATH)
        valid = False
    return valid


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("could not read %s (%s); using defaults", SETTINGS_PATH, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("%s does not hold a JSON object; using defaults", SETTINGS_PATH)
        return Settings()

    # Only use keys that exist in the dataclass
    valid_keys = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    settings = Settings(**filtered)
    if not _is_valid(settings):
        logger.warning("using defaults instead of %s", SETTINGS_PATH)
        return Settings()
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
