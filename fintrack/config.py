"""Client configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment variables (FINTRACK_*)."""

    # API
    api_base_url: str = "http://localhost:3000"
    http_timeout: float | None = None  # None = no client-side timeout

    # Paging
    fetch_page_size: int = 500  # backend max limit
    recent_expenses_limit: int = 5

    model_config = {
        "env_prefix": "FINTRACK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
