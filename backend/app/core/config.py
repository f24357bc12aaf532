import sys

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    API_BASE_URL: str = "https://jsonplaceholder.typicode.com"
    API_EMPLOYEES_PATH: str = "/users"
    API_EXPORT_PATH: str = "/posts"
    API_TIMEOUT_MS: int = 15000
    API_MAX_RETRIES: int = 2
    API_RETRY_BACKOFF_MS: int = 1000
    EMPLOYEE_LIST_LIMIT: int = 15

    SESSION_STORE_PATH: str = ".session_store.json"
    SESSION_KEY: str = "employee_management_session"
    SESSION_TIMEOUT_HOURS: int = 24

    EXPORT_DIR: str = "exports"

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


class RequestConfig(BaseModel):
    """Outbound request settings; frozen once the client is initialized."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    endpoints: dict[str, str]
    timeout_ms: int = 15000
    max_retries: int = 2
    retry_backoff_ms: int = 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestConfig":
        return cls(
            base_url=settings.API_BASE_URL.rstrip("/"),
            endpoints={
                "employees": settings.API_EMPLOYEES_PATH,
                "export": settings.API_EXPORT_PATH,
            },
            timeout_ms=settings.API_TIMEOUT_MS,
            max_retries=settings.API_MAX_RETRIES,
            retry_backoff_ms=settings.API_RETRY_BACKOFF_MS,
        )

    def url(self, resource: str, *parts: str) -> str:
        path = self.endpoints[resource]
        suffix = "".join(f"/{part}" for part in parts)
        return f"{self.base_url}{path}{suffix}"


settings = Settings()
