"""Configuration management using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from retreat_pricing.models.vat import DEFAULT_VAT_RATES, EU_COUNTRIES, VatConfig


# =============================================================================
# Find .env file
# =============================================================================

def find_env_file() -> str:
    """Find the .env file relative to project root."""
    candidates = [
        "config/.env",
        ".env",
        Path(__file__).parent.parent / "config" / ".env",
    ]

    for candidate in candidates:
        path = Path(candidate)
        if path.exists():
            return str(path)

    return "config/.env"  # Default


ENV_FILE = find_env_file()


# =============================================================================
# Settings Classes
# =============================================================================


class PricingSettings(BaseSettings):
    """Seller, VAT and booking-window settings."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="PRICING_",
        extra="ignore",
    )

    home_country: str = "DE"
    currency: str = "EUR"
    vat_rates: dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_VAT_RATES)
    )

    # Booking windows (calendar months before retreat start)
    early_bird_cutoff_months: int = 3
    standard_deposit_months: int = 2

    @field_validator("home_country", "currency")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("vat_rates")
    @classmethod
    def validate_rates(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        normalized = {}
        for country, rate in v.items():
            if not Decimal("0") <= rate <= Decimal("1"):
                raise ValueError(f"VAT rate for {country} must be between 0 and 1")
            normalized[country.strip().upper()] = rate
        return normalized

    @field_validator("early_bird_cutoff_months", "standard_deposit_months")
    @classmethod
    def validate_months(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Booking window must not be negative")
        return v

    def to_vat_config(self) -> VatConfig:
        """Build the VAT resolver configuration from these settings."""
        return VatConfig(
            home_country=self.home_country,
            rates=self.vat_rates,
            eu_countries=EU_COUNTRIES,
        )


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


class Settings(BaseSettings):
    """Main settings container with lazy loading."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cache for sub-settings
    _pricing: PricingSettings | None = None
    _app: AppSettings | None = None

    @property
    def pricing(self) -> PricingSettings:
        if self._pricing is None:
            self._pricing = PricingSettings()
        return self._pricing

    @property
    def app(self) -> AppSettings:
        if self._app is None:
            self._app = AppSettings()
        return self._app

    # Convenience accessors
    @property
    def home_country(self) -> str:
        return self.pricing.home_country

    @property
    def currency(self) -> str:
        return self.pricing.currency

    @property
    def log_level(self) -> str:
        return self.app.log_level

    @property
    def log_format(self) -> str:
        return self.app.log_format


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
