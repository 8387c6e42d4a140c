from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_base_url: str = "http://localhost:8080/api"
    request_timeout_seconds: float = 10.0
    # Must match the dashboard table page size, otherwise deep links land on the wrong page.
    page_size: int = 10
    search_debounce_ms: int = 300
    highlight_retry_interval_ms: int = 200
    highlight_max_attempts: int = 25  # 25 * 200ms = 5 seconds
    highlight_settle_ms: int = 200
    highlight_duration_ms: int = 3000
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]
    log_level: str = "INFO"

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000

    @property
    def highlight_retry_interval_seconds(self) -> float:
        return self.highlight_retry_interval_ms / 1000

    model_config = {"env_prefix": "ASSETFLOW_"}


settings = Settings()
