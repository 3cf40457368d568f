"""GovContracts — Central Configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from govcontracts.core.errors import ConfigError

# Local development only. Carries no credentials; refused in production.
LOCAL_DATABASE_URL = "sqlite:///./gov_contracts_dw.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── SAM.gov API ──
    sam_api_key: str = ""
    sam_base_url: str = "https://api.sam.gov/opportunities/v2/search"
    sam_page_limit: int = 1000
    source_name: str = "SAM.gov"

    # ── Posted date window overrides (MM/DD/YYYY) ──
    posted_from: Optional[str] = None
    posted_to: Optional[str] = None

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    environment: str = "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in ("production", "prod")

    def require_api_key(self) -> str:
        """Return the trimmed API key or fail closed."""
        key = (self.sam_api_key or "").strip()
        if not key:
            raise ConfigError("SAM_API_KEY is not set")
        return key

    def resolved_database_url(self) -> str:
        """Return DATABASE_URL, or the local SQLite file outside production."""
        url = (self.database_url or "").strip()
        if url:
            return url
        if self.is_production:
            raise ConfigError("DATABASE_URL is required when ENVIRONMENT=production")
        return LOCAL_DATABASE_URL


@lru_cache()
def get_settings() -> Settings:
    """Settings are read from the environment once per process."""
    return Settings()
