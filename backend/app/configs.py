"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Cache parameters
    CACHE_TTL_SECONDS: int = 600

    # Fetch orchestration
    FETCH_BACKEND: Literal["playwright", "catalog"] = "playwright"
    FETCH_SOURCE_LIMIT: int = 2
    SOURCE_SELECTION: Literal["prefix", "rotate"] = "prefix"
    TASK_TIMEOUT_SECONDS: float = 30.0
    MAX_ITEMS_PER_SOURCE: int = 10

    # Browser parameters
    PAGE_LOAD_TIMEOUT_MS: int = 15000
    SETTLE_DELAY_MS: int = 3000
    BROWSER_HEADLESS: bool = True
    BROWSER_USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=(".env", "../../.env"), extra="ignore")


settings = Settings()
