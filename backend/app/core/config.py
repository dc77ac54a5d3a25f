from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Trade Diary API"
    database_url: str = Field("sqlite:///./tradediary.db", env="DATABASE_URL")
    tz: str = Field("UTC", env="TZ")

    jwt_secret: str = Field("change_me_jwt_secret_key_for_trade_diary", env="JWT_SECRET")
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "TradeDiary"
    jwt_audience: str = "TradeDiary"
    access_token_expire_minutes: int = 7 * 24 * 60

    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )

    log_level: str = Field("INFO", env="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("database_url", mode="before")
    def expand_sqlite_path(cls, v: str) -> str:
        if v.startswith("sqlite") and "///" in v and not v.startswith("sqlite:////"):
            path = v.split("///", 1)[1]
            if path and not path.startswith("/") and path != ":memory:":
                abs_path = Path(os.getcwd()) / path
                return f"sqlite:///{abs_path}"
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
