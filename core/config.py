"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for BarberDesk happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. supabase_url -> SUPABASE_URL). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. In production mode the Supabase project
      URL and anon key are mandatory; in DEBUG mode they may be missing so the
      app (and the test suite) can start without a real project.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
auth/, or catalog/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("barberdesk.config")

# One week, matching the lifetime the browser keeps both session cookies.
_ONE_WEEK = 60 * 60 * 24 * 7


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    production-safety rules at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Supabase project
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    supabase_url: str = ""
    supabase_anon_key: str = ""
    # Only register, logout and password update need the service role key.
    supabase_service_role_key: str = ""

    # ------------------------------------------------------------------
    # Session cookies
    # ------------------------------------------------------------------

    secure_cookies: bool = True
    session_max_age: int = _ONE_WEEK

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"
    register_rate_limit: str = "5/minute"
    password_reset_rate_limit: str = "5/minute"

    # ------------------------------------------------------------------
    # HTTP surface
    # ------------------------------------------------------------------

    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = ["http://localhost:3000"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_supabase(self) -> "Settings":
        """Enforce the Supabase configuration policy.

        Production mode (DEBUG=false or not set): refuse to start without
            SUPABASE_URL and SUPABASE_ANON_KEY. Every route depends on them.

        Dev mode (DEBUG=true): log a warning instead. Provider calls will fail
            at request time, which surfaces as a 400/500 from the route.

        Both modes: the URL must be http(s) and the cookie lifetime positive.
        """
        missing = [
            name
            for name, value in (
                ("SUPABASE_URL", self.supabase_url),
                ("SUPABASE_ANON_KEY", self.supabase_anon_key),
            )
            if not value
        ]
        if missing:
            if self.debug:
                logger.warning("%s not set. Auth provider calls will fail.", ", ".join(missing))
            else:
                raise ValueError(
                    f"{', '.join(missing)} required in production mode. "
                    "Set them in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if self.supabase_url and not self.supabase_url.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must start with http:// or https://.")
        if self.session_max_age <= 0:
            raise ValueError("SESSION_MAX_AGE must be a positive number of seconds.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
