"""Tests for settings."""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from retreat_pricing.config import PricingSettings, Settings, get_settings
from retreat_pricing.services.price_summary import create_pricing_service


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_pricing_defaults():
    """Test default seller is German with the standard windows."""
    settings = PricingSettings(_env_file=None)

    assert settings.home_country == "DE"
    assert settings.currency == "EUR"
    assert settings.vat_rates["DE"] == Decimal("0.19")
    assert settings.early_bird_cutoff_months == 3
    assert settings.standard_deposit_months == 2


def test_pricing_from_environment(monkeypatch):
    """Test PRICING_ variables override defaults."""
    monkeypatch.setenv("PRICING_HOME_COUNTRY", "at")
    monkeypatch.setenv("PRICING_VAT_RATES", '{"at": "0.20", "DE": "0.19"}')
    monkeypatch.setenv("PRICING_EARLY_BIRD_CUTOFF_MONTHS", "4")

    settings = PricingSettings(_env_file=None)

    assert settings.home_country == "AT"
    assert settings.vat_rates == {"AT": Decimal("0.20"), "DE": Decimal("0.19")}
    assert settings.early_bird_cutoff_months == 4


def test_vat_rate_out_of_range():
    """Test rates above 100% are rejected."""
    with pytest.raises(ValidationError):
        PricingSettings(_env_file=None, vat_rates={"DE": Decimal("19")})


def test_negative_window_rejected():
    """Test negative booking windows are rejected."""
    with pytest.raises(ValidationError):
        PricingSettings(_env_file=None, standard_deposit_months=-1)


def test_to_vat_config():
    """Test settings build the resolver configuration."""
    config = PricingSettings(_env_file=None, home_country="fr").to_vat_config()

    assert config.home_country == "FR"
    assert "FR" in config.eu_countries


def test_create_pricing_service_uses_settings(monkeypatch):
    """Test service picks up configured windows and home country."""
    monkeypatch.setenv("PRICING_HOME_COUNTRY", "NL")
    monkeypatch.setenv("PRICING_STANDARD_DEPOSIT_MONTHS", "3")

    service = create_pricing_service(Settings())

    assert service.vat_config.home_country == "NL"
    assert service.standard_deposit_months == 3
    assert service.early_bird_cutoff_months == 3


def test_get_settings_is_cached():
    """Test settings container is created once."""
    assert get_settings() is get_settings()
