"""Runtime configuration for the guidance engine and the help desk."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_ENV_PREFIX = "TITLE_GUIDE_"
_DEFAULT_AI_URL = "https://openrouter.ai/api/v1/chat/completions"
_DEFAULT_AI_MODEL = "google/gemini-flash-1.5"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s%s=%r", _ENV_PREFIX, name, raw)
        return default


@dataclass(slots=True)
class GuidanceConfig:
    """Timing constants of the guidance loop, all in milliseconds."""

    debounce_ms: int = 800
    thinking_min_ms: int = 250
    thinking_jitter_ms: int = 150
    idle_poll_ms: int = 5_000
    idle_threshold_ms: int = 20_000
    field_tip_debounce_ms: int = 700
    almost_ready_threshold: int = 80

    @classmethod
    def from_env(cls) -> "GuidanceConfig":
        return cls(
            debounce_ms=_env_int("DEBOUNCE_MS", 800),
            thinking_min_ms=_env_int("THINKING_MIN_MS", 250),
            thinking_jitter_ms=_env_int("THINKING_JITTER_MS", 150),
            idle_poll_ms=_env_int("IDLE_POLL_MS", 5_000),
            idle_threshold_ms=_env_int("IDLE_THRESHOLD_MS", 20_000),
            field_tip_debounce_ms=_env_int("FIELD_TIP_DEBOUNCE_MS", 700),
            almost_ready_threshold=_env_int("ALMOST_READY_THRESHOLD", 80),
        )


@dataclass(slots=True)
class HelpDeskConfig:
    """Where the help desk looks for answers."""

    db_path: str = ":memory:"
    ai_api_key: str = ""
    ai_url: str = _DEFAULT_AI_URL
    ai_model: str = _DEFAULT_AI_MODEL
    ai_timeout: float = 15.0
    app_url: Optional[str] = None

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)

    @classmethod
    def from_env(cls) -> "HelpDeskConfig":
        db_path = os.getenv(_ENV_PREFIX + "HELP_DB")
        return cls(
            db_path=str(Path(db_path).expanduser()) if db_path else ":memory:",
            ai_api_key=os.getenv(_ENV_PREFIX + "AI_API_KEY", ""),
            ai_url=os.getenv(_ENV_PREFIX + "AI_URL", _DEFAULT_AI_URL),
            ai_model=os.getenv(_ENV_PREFIX + "AI_MODEL", _DEFAULT_AI_MODEL),
            app_url=os.getenv(_ENV_PREFIX + "APP_URL"),
        )
