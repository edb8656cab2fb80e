"""Promo service - server-side comparison of promo code against early bird."""

from decimal import Decimal

from retreat_pricing.errors import require
from retreat_pricing.models.pricing import PromoCode, PromoValidationResult
from retreat_pricing.utils.logger import get_logger
from retreat_pricing.utils.money import percent_of, round_whole

logger = get_logger(__name__)


def calculate_promo_discount(base_price: Decimal, promo_code: PromoCode) -> Decimal:
    """
    Calculate the discount a promo code grants on a price.

    Percentage codes round to whole currency units. Neither kind can exceed
    the base price.
    """
    require(base_price >= 0, f"Base price must not be negative: {base_price}")

    if promo_code.discount_type == "percentage":
        discount = round_whole(percent_of(base_price, promo_code.discount_value))
    else:
        discount = promo_code.discount_value

    return min(discount, base_price)


def determine_best_discount(
    base_price: Decimal,
    promo_code: PromoCode,
    early_bird_amount: Decimal,
    is_early_bird_eligible: bool,
) -> PromoValidationResult:
    """
    Compare a valid promo code with the room's early bird and keep the better.

    Promo wins only when strictly greater; on a tie early bird is kept since
    the customer gets it automatically.

    Args:
        base_price: Regular room price
        promo_code: Promo code that passed lookup, date and scope checks
        early_bird_amount: Early bird discount the room would give
        is_early_bird_eligible: Early bird time gate result

    Returns:
        PromoValidationResult for the booking UI and checkout
    """
    promo_amount = calculate_promo_discount(base_price, promo_code)
    early_bird = early_bird_amount if is_early_bird_eligible else Decimal("0")

    if promo_amount == 0 and early_bird == 0:
        return PromoValidationResult(valid=True, code=promo_code.code)

    if promo_amount > early_bird:
        amount, source = promo_amount, "promo_code"
    else:
        amount, source = early_bird, "early_bird"

    logger.info(
        "best_discount_determined",
        code=promo_code.code,
        source=source,
        promo_amount=promo_amount,
        early_bird_amount=early_bird,
    )

    return PromoValidationResult(
        valid=True,
        discount_amount=amount,
        source=source,
        promo_discount_amount=promo_amount,
        early_bird_discount_amount=early_bird,
        is_early_bird_eligible=is_early_bird_eligible,
        code=promo_code.code,
    )


def invalid_promo(error: str, code: str | None = None) -> PromoValidationResult:
    """Result for a code that failed validation."""
    return PromoValidationResult(valid=False, code=code, error=error)
