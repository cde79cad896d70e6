from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.theagoralabs.ai"


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Theagora MCP Gateway"
    DEBUG: bool = False
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Marketplace API
    THEAGORA_API_KEY: SecretStr | None = None
    THEAGORA_API_URL: str = DEFAULT_API_URL
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
