"""Tests for logging helpers."""

from decimal import Decimal

from retreat_pricing.utils.logger import _stringify_decimals, mask_vat_id


def test_mask_vat_id_keeps_last_chars():
    """Test only the last four characters stay visible."""
    assert mask_vat_id("DE123456789") == "*******6789"


def test_mask_short_value():
    """Test short values are fully masked."""
    assert mask_vat_id("DE1") == "***"


def test_decimals_rendered_as_strings():
    """Test Decimal amounts become strings for the JSON renderer."""
    event = _stringify_decimals(None, "info", {"event": "price_quoted", "total": Decimal("85.68")})
    assert event["total"] == "85.68"
