from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field("Classpoints API", alias="APP_NAME")
    database_url: str = Field("sqlite+aiosqlite:///./classpoints.db", alias="DATABASE_URL")

    # Tokens are issued by the external identity provider; we only verify them.
    auth_jwt_secret: str = Field("change_me", alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field("HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: Optional[str] = Field(None, alias="AUTH_JWT_AUDIENCE")
    auth_jwt_issuer: Optional[str] = Field(None, alias="AUTH_JWT_ISSUER")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    roster_cache_seconds: int = Field(30, alias="ROSTER_CACHE_SECONDS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    auto_create_tables: bool = Field(False, alias="AUTO_CREATE_TABLES")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()


