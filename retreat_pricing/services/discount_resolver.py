"""Discount resolver - early bird eligibility and best-discount selection."""

from datetime import date
from decimal import Decimal
from typing import assert_never

from retreat_pricing.errors import require
from retreat_pricing.models.pricing import (
    AppliedDiscount,
    DiscountSource,
    EarlyBirdDiscount,
    NoDiscount,
    PromoCodeDiscount,
    PromoValidationResult,
    RoomOffer,
)
from retreat_pricing.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EARLY_BIRD_CUTOFF_MONTHS = 3


def months_until(from_date: date, to_date: date) -> int:
    """
    Count whole calendar months between two dates.

    A partial month does not count: Jan 31 -> Feb 28 is 0 months,
    Jan 15 -> Mar 15 is 2 months.
    """
    months = (to_date.year - from_date.year) * 12 + (to_date.month - from_date.month)
    if to_date.day < from_date.day:
        months -= 1
    return months


def is_early_bird_eligible(
    booking_date: date,
    retreat_start: date,
    cutoff_months: int = DEFAULT_EARLY_BIRD_CUTOFF_MONTHS,
    deadline: date | None = None,
) -> bool:
    """
    Check the time gate for early bird pricing.

    Args:
        booking_date: Day the booking is made
        retreat_start: First day of the retreat
        cutoff_months: Minimum whole months before start
        deadline: Room-specific last day for early bird, on top of the cutoff

    Returns:
        True if the booking falls inside the early bird window
    """
    if months_until(booking_date, retreat_start) < cutoff_months:
        return False
    return deadline is None or booking_date <= deadline


def early_bird_discount(room: RoomOffer, eligible: bool) -> Decimal:
    """Discount the room's early bird price gives, 0 when it does not apply."""
    if not (eligible and room.has_early_bird):
        return Decimal("0")
    return max(room.regular_price - room.early_bird_price, Decimal("0"))


def resolve_discount(
    room: RoomOffer,
    eligible: bool,
    promo: PromoValidationResult | None = None,
) -> AppliedDiscount:
    """
    Pick the single discount that applies to a room.

    A valid promo result is authoritative: the server already compared promo
    against early bird, so its amount and source are used as-is. Without one
    the room's early bird applies when eligible.

    Args:
        room: Room price snapshot
        eligible: Early bird time gate result
        promo: Server-side promo validation result, if a code was applied

    Returns:
        NoDiscount, EarlyBirdDiscount or PromoCodeDiscount

    Raises:
        InputAssumptionViolation: If the promo result is inconsistent
    """
    local_early_bird = early_bird_discount(room, eligible)

    if promo is not None and promo.valid:
        require(
            promo.discount_amount <= room.regular_price,
            f"Promo discount {promo.discount_amount} exceeds room price {room.regular_price}",
        )
        logger.debug(
            "promo_result_applied",
            source=promo.source,
            amount=promo.discount_amount,
            local_early_bird=local_early_bird,
        )

        if promo.source == "promo_code":
            return PromoCodeDiscount(
                amount=promo.discount_amount,
                code=promo.code,
                alternative_amount=promo.early_bird_discount_amount,
            )
        if promo.source == "early_bird":
            if promo.discount_amount == 0:
                return NoDiscount()
            return EarlyBirdDiscount(
                amount=promo.discount_amount,
                alternative_amount=promo.promo_discount_amount,
            )

        require(
            promo.discount_amount == 0,
            "Promo result carries a discount amount without a source",
        )
        return NoDiscount()

    if local_early_bird > 0:
        return EarlyBirdDiscount(amount=local_early_bird)

    return NoDiscount()


def discount_source(discount: AppliedDiscount) -> DiscountSource | None:
    """Source tag of an applied discount, None when nothing applies."""
    if isinstance(discount, NoDiscount):
        return None
    if isinstance(discount, EarlyBirdDiscount):
        return "early_bird"
    if isinstance(discount, PromoCodeDiscount):
        return "promo_code"
    assert_never(discount)
