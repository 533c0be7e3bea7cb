"""Configuration module centralizing environment access.

A single Settings object is built at process start and handed to the
services; nothing else reads the environment.
"""
import os
from typing import Optional


DEFAULT_BOT_USERNAME = "Payto (Philosopher Banker and ILP/SPSP Slackbot)"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        # Core
        inferred_testing = (
            os.getenv("PYTEST_CURRENT_TEST")
            or os.getenv("ENVIRONMENT") == "testing"
            or os.getenv("TESTING") == "1"
        )
        self.environment: str = "testing" if inferred_testing else os.getenv("ENVIRONMENT", "development")
        self.port: int = int(os.getenv("PORT", "3000"))

        # Credential store ("memory://" keeps records in process)
        self.database_url: str = os.getenv("DB_URL") or os.getenv("DATABASE_URL") or "sqlite:///./payto.db"

        # Slack
        self.slack_token: Optional[str] = os.getenv("SLACK_TOKEN")
        self.slack_verification_token: Optional[str] = os.getenv("SLACK_VERIFICATION_TOKEN")
        self.slack_spsp_field_id: Optional[str] = os.getenv("SLACK_SPSP_FIELD_ID") or None
        self.bot_username: str = os.getenv("SLACK_BOT_USERNAME") or DEFAULT_BOT_USERNAME

        # Payments
        self.resolve_destination: bool = _flag("ILP_RESOLVE_DESTINATION", "true")
        self.http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    @property
    def uses_memory_store(self) -> bool:
        return self.database_url.startswith("memory://")


_SETTINGS_CACHE: Optional[Settings] = None


def get_settings(refresh: bool = False) -> Settings:
    """Return the cached Settings instance.

    Pass refresh=True in tests after modifying environment variables.
    """
    global _SETTINGS_CACHE
    if refresh or _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings()
    return _SETTINGS_CACHE
