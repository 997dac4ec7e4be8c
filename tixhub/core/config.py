# tixhub/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Supabase (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)

    If either is missing the app runs in demo mode: an in-memory identity
    and organizer profile, no network calls, nothing persisted.

    Optional:
      - SUPER_ADMIN_EMAIL (the single address granted the Super Admin role)
      - ROLE_PREFERENCE_PATH (where the last-chosen role is remembered)
    """

    PROJECT_NAME: str = "TixHub Backend"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Supabase config
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    # Super Admin is not a table; it is granted by exact email match
    SUPER_ADMIN_EMAIL: str | None = None
    SUPER_ADMIN_NAME: str = "Admin User"

    ROLE_PREFERENCE_PATH: str = ".tixhub/preferred_role.json"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
