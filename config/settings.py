"""Application settings — all configuration loaded from environment variables.

Usage:
    from config.settings import Settings
    settings = Settings()
    settings.validate()   # raises ConfigurationError if ANTHROPIC_API_KEY is missing
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from lens.errors import ConfigurationError
from lens.storage import DEFAULT_DB_PATH


@dataclass
class Settings:
    """Centralised application configuration.

    All values are read from environment variables at instantiation time
    so that tests can override them by patching ``os.environ``.
    """

    # ── API Keys ────────────────────────────────────────────────────────────
    anthropic_api_key: str = field(
        default_factory=lambda: os.environ.get("ANTHROPIC_API_KEY", "")
    )

    # ── Flask ───────────────────────────────────────────────────────────────
    debug: bool = field(
        default_factory=lambda: os.environ.get("FLASK_DEBUG", "0") == "1"
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "5001"))
    )

    # ── Storage ─────────────────────────────────────────────────────────────
    db_path: Path = field(
        default_factory=lambda: Path(os.environ.get("DB_PATH") or DEFAULT_DB_PATH)
    )

    # ── Research ────────────────────────────────────────────────────────────
    #: Model used for every grounded research call.
    research_model: str = field(
        default_factory=lambda: os.environ.get("RESEARCH_MODEL", "claude-haiku-4-5")
    )
    max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("MAX_TOKENS", "2048"))
    )
    max_web_searches: int = field(
        default_factory=lambda: int(os.environ.get("MAX_WEB_SEARCHES", "3"))
    )
    #: Parallel research calls when building an audience dashboard.
    dashboard_workers: int = field(
        default_factory=lambda: int(os.environ.get("DASHBOARD_WORKERS", "4"))
    )

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if any required setting is missing."""
        if not self.anthropic_api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Copy .env.example to .env and add your key."
            )
