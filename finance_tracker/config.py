"""Application configuration management using Pydantic Settings."""

import math
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_tracker.models.growth_simulator import MIN_INFLATION_RATE_PERCENT

PLACEHOLDER_SECRET_KEY = "your-secret-key-here-change-in-production"

APP_ENVS = ("development", "testing", "production")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
STORAGE_TYPES = ("sql", "memory")

DEFAULT_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Salary",
    "Freelance",
    "Investment",
    "Business",
    "Gift",
    "Other",
]


def _one_of(name: str, value: str, allowed: tuple) -> str:
    if value not in allowed:
        raise ValueError(f"{name} must be one of {', '.join(allowed)}")
    return value


class Settings(BaseSettings):
    """Finance tracker settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_env: str = Field(default="development", alias="APP_ENV")

    # Flask
    secret_key: str = Field(..., alias="SECRET_KEY")
    flask_app: str = Field(default="wsgi.py", alias="FLASK_APP")

    # Persistence: "sql" stores records through DB_URL, "memory" keeps them
    # in the process
    db_url: str = Field(default="sqlite:///finance_tracker.db", alias="DB_URL")
    storage_type: str = Field(default="sql", alias="STORAGE_TYPE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Analytics defaults, annual rates in percent
    default_inflation_rate: float = Field(default=3.0, alias="DEFAULT_INFLATION_RATE")
    cost_of_living_increase: float = Field(
        default=2.8, alias="COST_OF_LIVING_INCREASE"
    )
    default_categories: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES), alias="DEFAULT_CATEGORIES"
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        """Reject an empty or placeholder SECRET_KEY."""
        if not v or v == PLACEHOLDER_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v):
        return _one_of("APP_ENV", v, APP_ENVS)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Accept log levels in any case, store them upper-cased."""
        return _one_of("LOG_LEVEL", v.upper(), LOG_LEVELS)

    @field_validator("storage_type")
    @classmethod
    def validate_storage_type(cls, v):
        return _one_of("STORAGE_TYPE", v, STORAGE_TYPES)

    @field_validator("default_inflation_rate", "cost_of_living_increase")
    @classmethod
    def validate_rate(cls, v):
        if not math.isfinite(v) or v <= MIN_INFLATION_RATE_PERCENT:
            raise ValueError(
                f"Rates must be finite and greater than {MIN_INFLATION_RATE_PERCENT:g} percent"
            )
        return v


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Build a fresh Settings instance, optionally from a specific .env file."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Process-wide settings, built lazily
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Return the process-wide settings, building them on first use."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Forget the process-wide settings so the next call rebuilds them."""
    global _settings
    _settings = None
