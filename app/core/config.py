# app/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (signing secret for bearer tokens, no default on purpose)

    Optional:
      - STORAGE_BACKEND ("memory" | "database")
      - DATABASE_URL (only used when STORAGE_BACKEND=database)
      - SEED_DEMO_DATA / SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD
    """

    PROJECT_NAME: str = "Sweet Shop API"
    API_PREFIX: str = "/api"

    # Token signing
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7

    # bcrypt work factor
    BCRYPT_ROUNDS: int = 10

    # Storage
    STORAGE_BACKEND: Literal["memory", "database"] = "memory"
    DATABASE_URL: str = "sqlite:///./sweetshop.db"

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = (
        "http://localhost:3000,http://localhost:5000,http://localhost:5173"
    )

    # Demo data
    SEED_DEMO_DATA: bool = True
    SEED_ADMIN_EMAIL: str = "admin@sweetshop.com"
    SEED_ADMIN_PASSWORD: str = "admin123"

    LOG_LEVEL: str = "INFO"

    # Bind address for the `sweet-shop` entry point
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("JWT_SECRET")
    @classmethod
    def secret_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("JWT_SECRET cannot be empty")
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
