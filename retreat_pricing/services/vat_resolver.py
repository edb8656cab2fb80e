"""VAT resolver - rate selection with EU reverse charge."""

import re
from decimal import Decimal

from retreat_pricing.models.pricing import BillingContext
from retreat_pricing.models.vat import (
    EU_COUNTRIES,
    VatBreakdown,
    VatConfig,
    VatIdFormatResult,
    VatResolution,
)
from retreat_pricing.utils.logger import get_logger, mask_vat_id
from retreat_pricing.utils.money import round_currency

logger = get_logger(__name__)


# VAT ID formats per EU country (prefix included)
VAT_ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "AT": re.compile(r"^ATU\d{8}$"),
    "BE": re.compile(r"^BE[01]\d{9}$"),
    "BG": re.compile(r"^BG\d{9,10}$"),
    "HR": re.compile(r"^HR\d{11}$"),
    "CY": re.compile(r"^CY\d{8}[A-Z]$"),
    "CZ": re.compile(r"^CZ\d{8,10}$"),
    "DK": re.compile(r"^DK\d{8}$"),
    "EE": re.compile(r"^EE\d{9}$"),
    "FI": re.compile(r"^FI\d{8}$"),
    "FR": re.compile(r"^FR[A-HJ-NP-Z0-9]{2}\d{9}$"),
    "DE": re.compile(r"^DE\d{9}$"),
    "GR": re.compile(r"^EL\d{9}$"),  # Greece uses EL prefix
    "HU": re.compile(r"^HU\d{8}$"),
    "IE": re.compile(r"^IE\d{7}[A-W][A-IW]?$|^IE\d[A-Z+*]\d{5}[A-W]$"),
    "IT": re.compile(r"^IT\d{11}$"),
    "LV": re.compile(r"^LV\d{11}$"),
    "LT": re.compile(r"^LT(\d{9}|\d{12})$"),
    "LU": re.compile(r"^LU\d{8}$"),
    "MT": re.compile(r"^MT\d{8}$"),
    "NL": re.compile(r"^NL\d{9}B\d{2}$"),
    "PL": re.compile(r"^PL\d{10}$"),
    "PT": re.compile(r"^PT\d{9}$"),
    "RO": re.compile(r"^RO\d{2,10}$"),
    "SK": re.compile(r"^SK\d{10}$"),
    "SI": re.compile(r"^SI\d{8}$"),
    "ES": re.compile(r"^ES[A-Z0-9]\d{7}[A-Z0-9]$"),
    "SE": re.compile(r"^SE\d{12}$"),
}


def is_eu_country(country: str, config: VatConfig | None = None) -> bool:
    """Check EU membership against the configured member list."""
    members = config.eu_countries if config else EU_COUNTRIES
    return country.strip().upper() in members


def is_reverse_charge(billing: BillingContext, config: VatConfig) -> bool:
    """
    Check whether the EU B2B reverse charge applies.

    Requires a business customer with a validated VAT ID, billed in an EU
    member state other than the seller's home country.
    """
    return (
        billing.customer_type == "business"
        and billing.vat_id_validated
        and is_eu_country(billing.country, config)
        and billing.country != config.home_country
    )


def resolve_vat_rate(billing: BillingContext, config: VatConfig) -> VatResolution:
    """
    Select the VAT rate for a billing context.

    Args:
        billing: Country, customer type and VAT ID state
        config: Seller home country and rate table

    Returns:
        VatResolution with a rate in [0, 1]
    """
    if is_reverse_charge(billing, config):
        return VatResolution(
            country=billing.country,
            rate=Decimal("0"),
            is_reverse_charge=True,
        )

    rate = config.rates.get(billing.country)
    if rate is None:
        logger.debug("vat_rate_not_configured", country=billing.country)
        rate = Decimal("0")

    return VatResolution(country=billing.country, rate=rate)


def calculate_vat(amount: Decimal, rate: Decimal) -> VatBreakdown:
    """Apply a VAT rate to a net amount."""
    vat_amount = round_currency(amount * rate)
    return VatBreakdown(
        net=amount,
        rate=rate,
        vat_amount=vat_amount,
        gross=round_currency(amount + vat_amount),
    )


def validate_vat_id_format(vat_id: str, country: str) -> VatIdFormatResult:
    """
    Check a VAT ID against the country's format (no remote lookup).

    Args:
        vat_id: VAT ID as typed by the customer, with or without spaces
        country: Billing country code

    Returns:
        VatIdFormatResult
    """
    normalized = re.sub(r"\s", "", vat_id).upper()
    country = country.strip().upper()

    if not is_eu_country(country):
        return VatIdFormatResult(
            valid=False,
            normalized_vat_id=normalized,
            country=country,
            error="VAT ID validation is only available for EU countries",
        )

    pattern = VAT_ID_PATTERNS.get(country)
    if pattern is None or not pattern.match(normalized):
        logger.info(
            "vat_id_format_invalid",
            country=country,
            vat_id=mask_vat_id(normalized),
        )
        return VatIdFormatResult(
            valid=False,
            normalized_vat_id=normalized,
            country=country,
            error=f"Invalid VAT ID format for {country}",
        )

    return VatIdFormatResult(valid=True, normalized_vat_id=normalized, country=country)
