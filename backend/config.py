"""Application configuration using pydantic-settings."""

import re
from dataclasses import dataclass
from decimal import Decimal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./snapshots.db"

    # Valuation / analytics
    DISPLAY_CURRENCY: str = "USD"
    REBALANCE_THRESHOLD: Decimal = Decimal("1.00")
    TARGET_SUM_TOLERANCE: Decimal = Decimal("0.01")
    EXCHANGE_RATE_MAX_AGE_SECONDS: int = 3600

    @field_validator("DISPLAY_CURRENCY", mode="before")
    @classmethod
    def validate_display_currency(cls, v: str) -> str:
        """Normalize DISPLAY_CURRENCY to an upper-case three-letter code."""
        normalized = str(v).strip().upper()
        if not _CURRENCY_RE.match(normalized):
            raise ValueError(
                f"DISPLAY_CURRENCY must be a three-letter currency code, got {v!r}"
            )
        return normalized

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


@dataclass(frozen=True)
class EngineConfig:
    """Explicit inputs for a single analytics call.

    Built per request so the valuation, performance and rebalancing
    functions never read process-wide state themselves.
    """

    display_currency: str
    rebalance_threshold: Decimal = Decimal("1.00")
    target_sum_tolerance: Decimal = Decimal("0.01")

    @classmethod
    def from_settings(
        cls, app_settings: Settings, display_currency: str | None = None
    ) -> "EngineConfig":
        return cls(
            display_currency=(display_currency or app_settings.DISPLAY_CURRENCY).upper(),
            rebalance_threshold=app_settings.REBALANCE_THRESHOLD,
            target_sum_tolerance=app_settings.TARGET_SUM_TOLERANCE,
        )


settings = Settings()
