"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "school_user"
    postgres_password: str = "password"
    postgres_db: str = "school_db"

    # Full DSN override (e.g. sqlite:///./school.db for local runs)
    database_url: Optional[str] = None

    # Connection pool
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False
    create_schema: bool = True

    # JWT Auth
    jwt_secret_key: str = "your_jwt_secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Password hashing
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # CORS
    cors_origins: List[str] = ["http://localhost:3001", "http://localhost:5173"]

    # App
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct the database connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
