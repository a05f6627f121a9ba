from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_PORT = 3000


class Settings(BaseSettings):
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    log_level: str = "INFO"
    log_file: str = "logs/webhooks.log"
    max_body_bytes: int = 100 * 1024  # 100 KiB

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("port", mode="before")
    @classmethod
    def fallback_port(cls, value):
        # Unset, blank or garbage PORT falls back to the default
        try:
            port = int(value)
        except (TypeError, ValueError):
            return DEFAULT_PORT
        if not 0 < port < 65536:
            return DEFAULT_PORT
        return port

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return str(value).upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
