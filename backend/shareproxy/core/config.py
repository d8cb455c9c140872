"""Application configuration."""
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    app_name: str = "Share Proxy API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS - accepts comma-separated string from env
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Return CORS origins as a list."""
        if not self.cors_origins:
            return ["http://localhost:5173", "http://localhost:3000"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Upstream requests
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    upstream_timeout: float = 30.0
    upstream_connect_timeout: float = 10.0

    # Extraction
    raw_html_limit: int = 20000
    html_snippet_limit: int = 5000
    heuristic_text_limit: int = 200
    # Candidate list endpoints on the alternate API domain, tried in order
    list_api_paths: list[str] = [
        "/share/list?shorturl={surl}&root=1&page=1&num=100",
        "/api/shorturlinfo?shorturl={surl}&root=1",
        "/share/list?shareid={surl}&root=1&page=1&num=100",
    ]

    # Proxy event log
    log_store_max_ids: int = 1000
    log_store_ttl_seconds: float = 3600


settings = Settings()
