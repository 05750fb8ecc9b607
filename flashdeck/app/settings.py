"""Configuration helpers for the Flashdeck runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass

from flashdeck.cards.store import DEFAULT_RECENT_LIMIT


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    recent_limit: int

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Flashdeck")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        try:
            recent_limit = int(os.getenv("FLASHDECK_RECENT_LIMIT", str(DEFAULT_RECENT_LIMIT)))
        except ValueError as exc:  # pragma: no cover - defensive parsing
            raise RuntimeError("FLASHDECK_RECENT_LIMIT must be an integer.") from exc

        if recent_limit < 1:
            raise RuntimeError("FLASHDECK_RECENT_LIMIT must be a positive integer.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            recent_limit=recent_limit,
        )
