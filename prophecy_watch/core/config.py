"""
Application configuration management.

This module defines a ``Settings`` dataclass that reads its values from
environment variables at instantiation time.  A ``.env`` file in the
working directory is loaded first so that local development can keep the
VAPID key pair out of the shell profile.  Each configuration option has a
reasonable default which can be overridden by setting the corresponding
environment variable.
"""

from dataclasses import dataclass, field
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Configuration values loaded from environment variables with defaults."""

    # Application settings
    ENVIRONMENT: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    PORT: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    DEBUG: bool = field(init=False)
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Web Push (VAPID) credentials.  When either key is missing push
    # delivery is disabled, but the API and the notifier keep running.
    VAPID_PUBLIC_KEY: Optional[str] = field(default_factory=lambda: os.getenv("VAPID_PUBLIC_KEY") or None)
    VAPID_PRIVATE_KEY: Optional[str] = field(default_factory=lambda: os.getenv("VAPID_PRIVATE_KEY") or None)
    VAPID_SUBJECT: str = field(default_factory=lambda: os.getenv("VAPID_SUBJECT", "mailto:admin@example.com"))

    # Feed retrieval and caching
    FEED_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(os.getenv("FEED_TIMEOUT_SECONDS", "15")))
    NEWS_CACHE_TTL_SECONDS: float = field(default_factory=lambda: float(os.getenv("NEWS_CACHE_TTL_SECONDS", "600")))

    # Change notifier
    NOTIFY_INTERVAL_SECONDS: float = field(default_factory=lambda: float(os.getenv("NOTIFY_INTERVAL_SECONDS", "300")))
    NOTIFIER_ENABLED: bool = field(default_factory=lambda: _env_flag("NOTIFIER_ENABLED"))

    # Frontend assets served at ``/``
    STATIC_DIR: str = field(default_factory=lambda: os.getenv("STATIC_DIR", "public"))

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ])

    def __post_init__(self) -> None:
        """Derive additional configuration settings after initialization."""
        self.DEBUG = self.ENVIRONMENT.lower() == "development"

    @property
    def is_development(self) -> bool:
        """Return True if the environment is set to development."""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def push_enabled(self) -> bool:
        """Return True if both halves of the VAPID key pair are configured."""
        return bool(self.VAPID_PUBLIC_KEY and self.VAPID_PRIVATE_KEY)


# Instantiate a single settings object that can be imported across the
# application.
settings = Settings()
