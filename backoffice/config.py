# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Back-office settings.

    Every field can be overridden with an environment variable of the same
    name (case-insensitive) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Retail Back-Office"
    database_url: str = "sqlite:///./backoffice.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Sessions
    session_cookie_name: str = "session"
    session_cookie_secure: bool = False
    session_expiry_hours: int = 24 * 7

    # One-time administrator bootstrap
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str = "admin123"

    # Seed default modules and roles when the app starts
    seed_on_startup: bool = True

    # Per-connection buffer of the change notification bus
    realtime_queue_size: int = 100

    @property
    def session_max_age(self) -> int:
        """Session lifetime in seconds (cookie max-age)."""
        return self.session_expiry_hours * 3600


settings = Settings()
