from functools import lru_cache
from typing import Annotated, Any
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_parse_none_str="none",
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./tasks.db"
    # When false, relationship rows may point at ids that do not exist
    ENFORCE_FOREIGN_KEYS: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # API
    API_TITLE: str = "Task List API"
    API_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "info"

    # CORS
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return v
        return []

@lru_cache()
def get_settings() -> Settings:
    return Settings()
