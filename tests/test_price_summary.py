"""Tests for price summary assembler and pricing service."""

import pytest
from datetime import date
from decimal import Decimal

from retreat_pricing.errors import InputAssumptionViolation
from retreat_pricing.models.pricing import (
    BillingContext,
    EarlyBirdDiscount,
    NoDiscount,
    PaymentPlanSelection,
    PromoCodeDiscount,
    PromoValidationResult,
    QuoteRequest,
    RoomOffer,
)
from retreat_pricing.models.vat import VatConfig
from retreat_pricing.services.price_summary import (
    PricingService,
    assemble_price_summary,
    build_discount_line,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def room():
    """Room at 800 with a 720 early bird price."""
    return RoomOffer(
        regular_price=Decimal("800"),
        early_bird_price=Decimal("720"),
        early_bird_enabled=True,
        deposit_price=Decimal("80"),
    )


@pytest.fixture
def private_de():
    return BillingContext(country="DE", customer_type="private")


@pytest.fixture
def scheduled():
    return PaymentPlanSelection(payment_type="scheduled")


@pytest.fixture
def service():
    return PricingService(vat_config=VatConfig(home_country="DE"))


@pytest.fixture
def promo_100():
    """Server decision: 100 promo beats 80 early bird."""
    return PromoValidationResult(
        valid=True,
        discount_amount=Decimal("100"),
        source="promo_code",
        promo_discount_amount=Decimal("100"),
        early_bird_discount_amount=Decimal("80"),
        is_early_bird_eligible=True,
        code="SURF100",
    )


BOOKED = date(2026, 1, 10)
FOUR_MONTHS_OUT = date(2026, 5, 10)


# =============================================================================
# Discount Line Tests
# =============================================================================


def test_discount_line_empty_for_no_discount():
    """Test no discount renders an empty line."""
    line = build_discount_line(NoDiscount())

    assert line.source is None
    assert line.amount == 0
    assert line.alternative is None


def test_discount_line_promo_with_crossed_out_early_bird():
    """Test losing early bird is carried as the alternative."""
    line = build_discount_line(
        PromoCodeDiscount(amount=Decimal("100"), code="SURF100", alternative_amount=Decimal("80"))
    )

    assert line.source == "promo_code"
    assert line.label == "Promo code SURF100"
    assert line.alternative.source == "early_bird"
    assert line.alternative.label == "Early Bird"
    assert line.alternative.amount == Decimal("80")


def test_discount_line_early_bird_alone():
    """Test early bird without competing promo."""
    line = build_discount_line(EarlyBirdDiscount(amount=Decimal("80")))

    assert line.label == "Early Bird"
    assert line.alternative is None


# =============================================================================
# Scenario Tests
# =============================================================================


def test_early_bird_four_months_out(service, room, private_de, scheduled):
    """Test 800 room, 720 early bird, booked 4 months out."""
    summary = service.quote(room, private_de, scheduled, BOOKED, FOUR_MONTHS_OUT)

    assert summary.subtotal == Decimal("800")
    assert summary.discount_line.source == "early_bird"
    assert summary.discount_line.amount == Decimal("80")
    assert summary.final_price == Decimal("720")
    assert summary.deposit_percentage == 10
    assert [e.percentage for e in summary.schedule] == [10, 50, 40]
    assert [e.months_before_start for e in summary.schedule] == [None, 2, 1]


def test_vat_added_to_amount_due_today(service, room, private_de, scheduled):
    """Test VAT is charged on the deposit and recorded on the full price."""
    summary = service.quote(room, private_de, scheduled, BOOKED, FOUR_MONTHS_OUT)

    assert summary.vat_rate == Decimal("0.19")
    assert summary.vat_amount == Decimal("13.68")
    assert summary.total_due_today == Decimal("85.68")
    assert summary.total_vat_amount == Decimal("136.80")
    assert summary.total_amount == Decimal("856.80")
    assert summary.balance_due == Decimal("771.12")
    assert len(summary.future_installments) == 2


def test_validated_promo_beats_smaller_early_bird(service, room, private_de, scheduled, promo_100):
    """Test promo decision from the server wins, early bird shown crossed out."""
    summary = service.quote(room, private_de, scheduled, BOOKED, FOUR_MONTHS_OUT, promo=promo_100)

    assert summary.discount_line.source == "promo_code"
    assert summary.discount_line.amount == Decimal("100")
    assert summary.discount_line.alternative.label == "Early Bird"
    assert summary.discount_line.alternative.amount == Decimal("80")
    assert summary.final_price == Decimal("700")


def test_late_booking_one_month_out(service, room, private_de, scheduled):
    """Test 50% deposit and no early bird one month before start."""
    summary = service.quote(room, private_de, scheduled, date(2026, 4, 10), date(2026, 5, 10))

    assert summary.discount_line.source is None
    assert summary.final_price == Decimal("800")
    assert summary.deposit_percentage == 50
    assert [e.amount_due for e in summary.schedule] == [Decimal("400.00"), Decimal("400.00")]
    assert summary.schedule[1].due_date == date(2026, 4, 10)


def test_french_business_reverse_charge(service, room, scheduled):
    """Test 0% VAT for a French business with a validated VAT ID."""
    billing = BillingContext(country="FR", customer_type="business", vat_id_validated=True)

    summary = service.quote(room, billing, scheduled, BOOKED, FOUR_MONTHS_OUT)

    assert summary.is_reverse_charge is True
    assert summary.vat_rate == Decimal("0")
    assert summary.total_due_today == Decimal("72.00")


def test_german_business_pays_german_vat(service, room, scheduled):
    """Test no reverse charge in the seller's home country."""
    billing = BillingContext(country="DE", customer_type="business", vat_id_validated=True)

    summary = service.quote(room, billing, scheduled, BOOKED, FOUR_MONTHS_OUT)

    assert summary.is_reverse_charge is False
    assert summary.vat_rate == Decimal("0.19")


def test_full_payment_has_no_balance(service, room, private_de):
    """Test full payment charges the VAT-inclusive total today."""
    selection = PaymentPlanSelection(payment_type="full")

    summary = service.quote(room, private_de, selection, BOOKED, FOUR_MONTHS_OUT)

    assert len(summary.schedule) == 1
    assert summary.future_installments == []
    assert summary.total_due_today == summary.total_amount == Decimal("856.80")
    assert summary.balance_due == Decimal("0")


# =============================================================================
# Consistency Tests
# =============================================================================


def test_preview_equals_checkout(room, private_de, scheduled, promo_100):
    """Test identical inputs give identical summaries."""
    config = VatConfig()
    kwargs = dict(
        months_until_start=4,
        early_bird_eligible=True,
        vat_config=config,
        promo=promo_100,
    )

    preview = assemble_price_summary(room, private_de, scheduled, **kwargs)
    checkout = assemble_price_summary(room, private_de, scheduled, **kwargs)

    assert preview == checkout


@pytest.mark.parametrize("months", [0, 1, 2, 3, 6])
def test_price_identity(room, private_de, scheduled, months):
    """Test regular minus discount equals final price and schedule sums to it."""
    summary = assemble_price_summary(
        room,
        private_de,
        scheduled,
        months_until_start=months,
        early_bird_eligible=months >= 3,
        vat_config=VatConfig(),
    )

    assert summary.subtotal - summary.discount_line.amount == summary.final_price
    assert summary.final_price >= 0
    assert sum(e.amount_due for e in summary.schedule) == summary.final_price


def test_open_deadline_no_early_bird_one_month_out(service, private_de, scheduled):
    """Test a later room deadline does not grant early bird one month out."""
    room = RoomOffer(
        regular_price=Decimal("800"),
        early_bird_price=Decimal("720"),
        early_bird_enabled=True,
        early_bird_deadline=date(2026, 4, 30),
    )

    summary = service.quote(room, private_de, scheduled, date(2026, 4, 10), date(2026, 5, 10))

    assert summary.discount_line.source is None
    assert summary.final_price == Decimal("800")
    assert summary.deposit_percentage == 50


def test_passed_deadline_ends_early_bird(service, private_de, scheduled):
    """Test a passed room deadline removes early bird even 4 months out."""
    room = RoomOffer(
        regular_price=Decimal("800"),
        early_bird_price=Decimal("720"),
        early_bird_enabled=True,
        early_bird_deadline=date(2026, 1, 1),
    )

    summary = service.quote(room, private_de, scheduled, BOOKED, FOUR_MONTHS_OUT)

    assert summary.discount_line.source is None


def test_quote_request(service, room, private_de):
    """Test pricing from a parsed request payload."""
    request = QuoteRequest(
        room=room,
        billing=private_de,
        booking_date=BOOKED,
        retreat_start=FOUR_MONTHS_OUT,
    )

    summary = service.quote_request(request)

    assert summary.payment_type == "scheduled"
    assert summary.final_price == Decimal("720")


def test_booking_after_start_rejected(service, room, private_de, scheduled):
    """Test booking after the retreat started fails loudly."""
    with pytest.raises(InputAssumptionViolation):
        service.quote(room, private_de, scheduled, date(2026, 6, 1), date(2026, 5, 10))
