"""Price summary assembler - one breakdown for booking preview and checkout."""

from datetime import date
from decimal import Decimal
from typing import assert_never

from retreat_pricing.config import Settings, get_settings
from retreat_pricing.errors import require
from retreat_pricing.models.pricing import (
    AppliedDiscount,
    BillingContext,
    DiscountAlternative,
    DiscountLine,
    EarlyBirdDiscount,
    NoDiscount,
    PaymentPlanSelection,
    PriceSummary,
    PromoCodeDiscount,
    PromoValidationResult,
    QuoteRequest,
    RoomOffer,
)
from retreat_pricing.models.vat import VatConfig
from retreat_pricing.services.discount_resolver import (
    DEFAULT_EARLY_BIRD_CUTOFF_MONTHS,
    is_early_bird_eligible,
    months_until,
    resolve_discount,
)
from retreat_pricing.services.payment_schedule import (
    DEFAULT_STANDARD_DEPOSIT_MONTHS,
    deposit_percentage,
    plan_payment_schedule,
)
from retreat_pricing.services.vat_resolver import calculate_vat, resolve_vat_rate
from retreat_pricing.utils.logger import get_logger
from retreat_pricing.utils.money import round_currency

logger = get_logger(__name__)

EARLY_BIRD_LABEL = "Early Bird"
PROMO_CODE_LABEL = "Promo code"


# =============================================================================
# Assembler
# =============================================================================


def build_discount_line(discount: AppliedDiscount) -> DiscountLine:
    """Render an applied discount as an order summary row."""
    if isinstance(discount, NoDiscount):
        return DiscountLine()

    if isinstance(discount, EarlyBirdDiscount):
        alternative = None
        if discount.alternative_amount > 0:
            alternative = DiscountAlternative(
                source="promo_code",
                label=PROMO_CODE_LABEL,
                amount=discount.alternative_amount,
            )
        return DiscountLine(
            source="early_bird",
            label=EARLY_BIRD_LABEL,
            amount=discount.amount,
            alternative=alternative,
        )

    if isinstance(discount, PromoCodeDiscount):
        alternative = None
        if discount.alternative_amount > 0:
            alternative = DiscountAlternative(
                source="early_bird",
                label=EARLY_BIRD_LABEL,
                amount=discount.alternative_amount,
            )
        label = f"{PROMO_CODE_LABEL} {discount.code}" if discount.code else PROMO_CODE_LABEL
        return DiscountLine(
            source="promo_code",
            label=label,
            amount=discount.amount,
            alternative=alternative,
        )

    assert_never(discount)


def assemble_price_summary(
    room: RoomOffer,
    billing: BillingContext,
    selection: PaymentPlanSelection,
    months_until_start: int,
    early_bird_eligible: bool,
    vat_config: VatConfig,
    promo: PromoValidationResult | None = None,
    booking_date: date | None = None,
    retreat_start: date | None = None,
    standard_months: int = DEFAULT_STANDARD_DEPOSIT_MONTHS,
    currency: str = "EUR",
) -> PriceSummary:
    """
    Compose discount, payment schedule and VAT into the order summary.

    Pure: the booking preview and the checkout call this with the same
    inputs and get the same figures, so the displayed price is the charged
    price. VAT is added to what is due today; the full-price VAT is kept for
    the booking record.

    Args:
        room: Room price snapshot
        billing: Billing country and B2B state
        selection: Full or scheduled payment
        months_until_start: Whole months from booking to retreat start
        early_bird_eligible: Early bird time gate result
        vat_config: Seller VAT configuration
        promo: Server-side promo validation result
        booking_date: Resolves due dates when given
        retreat_start: Resolves due dates when given
        standard_months: Lead time that qualifies for the 10% deposit
        currency: Currency code of all amounts

    Returns:
        PriceSummary
    """
    discount = resolve_discount(room, early_bird_eligible, promo)
    final_price = room.regular_price - discount.amount
    require(final_price >= 0, f"Final price must not be negative: {final_price}")

    schedule = plan_payment_schedule(
        final_price,
        selection.payment_type,
        months_until_start,
        booking_date=booking_date,
        retreat_start=retreat_start,
        standard_months=standard_months,
    )

    vat = resolve_vat_rate(billing, vat_config)
    due_today = calculate_vat(schedule[0].amount_due, vat.rate)
    full_price = calculate_vat(round_currency(final_price), vat.rate)

    if selection.payment_type == "full":
        balance_due = Decimal("0.00")
    else:
        balance_due = full_price.gross - due_today.gross

    return PriceSummary(
        currency=currency,
        subtotal=room.regular_price,
        discount_line=build_discount_line(discount),
        final_price=final_price,
        payment_type=selection.payment_type,
        deposit_percentage=deposit_percentage(months_until_start, standard_months),
        vat_rate=vat.rate,
        is_reverse_charge=vat.is_reverse_charge,
        vat_amount=due_today.vat_amount,
        total_due_today=due_today.gross,
        schedule=schedule,
        future_installments=schedule[1:],
        total_vat_amount=full_price.vat_amount,
        total_amount=full_price.gross,
        balance_due=balance_due,
    )


# =============================================================================
# Pricing Service
# =============================================================================


class PricingService:
    """
    Facade used by the booking preview and the checkout.

    Derives lead time and early bird eligibility from dates, then calls the
    assembler with the configured VAT table and booking windows.
    """

    def __init__(
        self,
        vat_config: VatConfig | None = None,
        early_bird_cutoff_months: int = DEFAULT_EARLY_BIRD_CUTOFF_MONTHS,
        standard_deposit_months: int = DEFAULT_STANDARD_DEPOSIT_MONTHS,
        currency: str = "EUR",
    ):
        """
        Initialize pricing service.

        Args:
            vat_config: Seller VAT configuration (defaults to German seller)
            early_bird_cutoff_months: Lead time for early bird pricing
            standard_deposit_months: Lead time for the 10% deposit
            currency: Currency code of all amounts
        """
        self.vat_config = vat_config or VatConfig()
        self.early_bird_cutoff_months = early_bird_cutoff_months
        self.standard_deposit_months = standard_deposit_months
        self.currency = currency

    def quote(
        self,
        room: RoomOffer,
        billing: BillingContext,
        selection: PaymentPlanSelection,
        booking_date: date,
        retreat_start: date,
        promo: PromoValidationResult | None = None,
    ) -> PriceSummary:
        """
        Price a booking made on booking_date for a retreat starting retreat_start.

        Raises:
            InputAssumptionViolation: If the retreat already started
        """
        require(
            retreat_start >= booking_date,
            f"Retreat start {retreat_start} is before booking date {booking_date}",
        )

        months = months_until(booking_date, retreat_start)
        eligible = is_early_bird_eligible(
            booking_date,
            retreat_start,
            cutoff_months=self.early_bird_cutoff_months,
            deadline=room.early_bird_deadline,
        )

        summary = assemble_price_summary(
            room,
            billing,
            selection,
            months_until_start=months,
            early_bird_eligible=eligible,
            vat_config=self.vat_config,
            promo=promo,
            booking_date=booking_date,
            retreat_start=retreat_start,
            standard_months=self.standard_deposit_months,
            currency=self.currency,
        )

        logger.info(
            "price_quoted",
            months_until_start=months,
            early_bird_eligible=eligible,
            discount_source=summary.discount_line.source,
            payment_type=summary.payment_type,
            country=billing.country,
            reverse_charge=summary.is_reverse_charge,
            total_due_today=summary.total_due_today,
        )

        return summary

    def quote_request(self, request: QuoteRequest) -> PriceSummary:
        """Price a parsed QuoteRequest."""
        return self.quote(
            request.room,
            request.billing,
            request.selection,
            booking_date=request.booking_date,
            retreat_start=request.retreat_start,
            promo=request.promo,
        )


def create_pricing_service(settings: Settings | None = None) -> PricingService:
    """
    Create a pricing service from settings.

    Args:
        settings: Settings container (defaults to the cached one)

    Returns:
        Configured PricingService
    """
    settings = settings or get_settings()
    pricing = settings.pricing

    return PricingService(
        vat_config=pricing.to_vat_config(),
        early_bird_cutoff_months=pricing.early_bird_cutoff_months,
        standard_deposit_months=pricing.standard_deposit_months,
        currency=pricing.currency,
    )
