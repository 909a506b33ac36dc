"""Application configuration loaded via pydantic settings."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List
import secrets

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Time Tracker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./timetracker/timetracker.db"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Rates
    PLN_TO_UAH_RATE: Decimal = Decimal("10.5")
    MONTHLY_HOURS: int = 160
    BASE_CURRENCY: str = "PLN"
    # Placeholder, not a live quote
    USD_DIVISOR: Decimal = Decimal("4.0")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./timetracker/logs/app.log"

    @field_validator("PLN_TO_UAH_RATE", "USD_DIVISOR")
    @classmethod
    def positive_rate(cls, v: Decimal) -> Decimal:
        """Reject zero or negative conversion rates."""
        if v <= 0:
            raise ValueError("Conversion rates must be positive")
        return v

    @field_validator("MONTHLY_HOURS")
    @classmethod
    def positive_hours(cls, v: int) -> int:
        """Reject a non-positive monthly hours divisor."""
        if v <= 0:
            raise ValueError("MONTHLY_HOURS must be positive")
        return v

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()


@dataclass(frozen=True)
class RateConfig:
    """Read-only snapshot of the rate constants used by cost and report code."""

    pln_to_uah_rate: Decimal
    monthly_hours: int
    base_currency: str = "PLN"
    usd_divisor: Decimal = Decimal("4.0")

    @classmethod
    def from_settings(cls, source: Settings = settings) -> "RateConfig":
        """Build the snapshot from application settings."""
        return cls(
            pln_to_uah_rate=source.PLN_TO_UAH_RATE,
            monthly_hours=source.MONTHLY_HOURS,
            base_currency=source.BASE_CURRENCY.upper(),
            usd_divisor=source.USD_DIVISOR,
        )


rate_config = RateConfig.from_settings()
