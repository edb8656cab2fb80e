"""Pydantic models and reference data for VAT handling."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# EU member states (ISO 3166-1 alpha-2)
EU_COUNTRIES: frozenset[str] = frozenset({
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR", "DE", "GR",
    "HU", "IE", "IT", "LV", "LT", "LU", "MT", "NL", "PL", "PT", "RO", "SK",
    "SI", "ES", "SE",
})

# Standard rates charged by the seller
DEFAULT_VAT_RATES: dict[str, Decimal] = {
    "DE": Decimal("0.19"),  # Germany
    "FR": Decimal("0.20"),  # France
    "ES": Decimal("0.21"),  # Spain
    "IT": Decimal("0.22"),  # Italy
    "PT": Decimal("0.23"),  # Portugal
    "NL": Decimal("0.21"),  # Netherlands
    "BE": Decimal("0.21"),  # Belgium
    "AT": Decimal("0.20"),  # Austria
    "IE": Decimal("0.23"),  # Ireland
    "PL": Decimal("0.23"),  # Poland
}


class VatConfig(BaseModel):
    """Seller-side VAT configuration passed into the resolver."""

    model_config = ConfigDict(frozen=True)

    home_country: str = "DE"
    rates: dict[str, Decimal] = Field(default_factory=lambda: dict(DEFAULT_VAT_RATES))
    eu_countries: frozenset[str] = EU_COUNTRIES

    @field_validator("home_country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("rates")
    @classmethod
    def normalize_rate_keys(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        return {country.strip().upper(): rate for country, rate in v.items()}


class VatResolution(BaseModel):
    """Outcome of VAT rate selection for a billing context."""

    country: str
    rate: Decimal = Field(ge=0, le=1)
    is_reverse_charge: bool = False


class VatBreakdown(BaseModel):
    """VAT applied to a single amount."""

    net: Decimal
    rate: Decimal
    vat_amount: Decimal
    gross: Decimal


class VatIdFormatResult(BaseModel):
    """Result of the local VAT ID format check."""

    valid: bool
    normalized_vat_id: str
    country: str
    error: str | None = None
