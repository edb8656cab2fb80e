"""Payment schedule planner.

Standard flow (booking >= 2 months before retreat), 3 payments:
    10% deposit at booking, 50% two months before, 40% one month before.

Late flow (booking < 2 months before retreat), 2 payments:
    50% at booking, 50% one month before.

Full payment: 100% at booking.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from retreat_pricing.errors import require
from retreat_pricing.models.pricing import PaymentType, ScheduleEntry, ScheduleKind
from retreat_pricing.utils.logger import get_logger
from retreat_pricing.utils.money import percent_of, round_currency

logger = get_logger(__name__)

DEFAULT_STANDARD_DEPOSIT_MONTHS = 2
STANDARD_DEPOSIT_PERCENTAGE = 10
LATE_DEPOSIT_PERCENTAGE = 50


# =============================================================================
# Plan Templates
# =============================================================================


@dataclass(frozen=True)
class InstallmentRule:
    """Template row of a payment plan."""

    kind: ScheduleKind
    percentage: int
    label: str
    months_before_start: int | None = None  # None = at booking


FULL_PLAN: tuple[InstallmentRule, ...] = (
    InstallmentRule("full", 100, "Full payment (100%)"),
)

STANDARD_PLAN: tuple[InstallmentRule, ...] = (
    InstallmentRule("deposit", 10, "Deposit (10%)"),
    InstallmentRule("second", 50, "Second payment (50%)", months_before_start=2),
    InstallmentRule("balance", 40, "Final payment (40%)", months_before_start=1),
)

LATE_PLAN: tuple[InstallmentRule, ...] = (
    InstallmentRule("late_first", 50, "First payment (50%)"),
    InstallmentRule("late_second", 50, "Final payment (50%)", months_before_start=1),
)


# =============================================================================
# Date Helpers
# =============================================================================


def subtract_months(value: date, months: int) -> date:
    """Move a date back by calendar months, clamping to the month's last day."""
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def describe_due_rule(months_before_start: int | None) -> str:
    if months_before_start is None:
        return "due today"
    unit = "month" if months_before_start == 1 else "months"
    return f"{months_before_start} {unit} before start"


# =============================================================================
# Planner
# =============================================================================


def deposit_percentage(
    months_until_start: int,
    standard_months: int = DEFAULT_STANDARD_DEPOSIT_MONTHS,
) -> int:
    """Deposit share due at booking: 10% with enough lead time, else 50%."""
    if months_until_start >= standard_months:
        return STANDARD_DEPOSIT_PERCENTAGE
    return LATE_DEPOSIT_PERCENTAGE


def select_plan(
    payment_type: PaymentType,
    months_until_start: int,
    standard_months: int = DEFAULT_STANDARD_DEPOSIT_MONTHS,
) -> tuple[InstallmentRule, ...]:
    """Pick the plan template for a payment type and lead time."""
    require(
        payment_type in ("full", "scheduled"),
        f"Unknown payment type: {payment_type!r}",
    )

    if payment_type == "full":
        return FULL_PLAN
    if deposit_percentage(months_until_start, standard_months) == STANDARD_DEPOSIT_PERCENTAGE:
        return STANDARD_PLAN
    return LATE_PLAN


def plan_payment_schedule(
    final_price: Decimal,
    payment_type: PaymentType,
    months_until_start: int,
    booking_date: date | None = None,
    retreat_start: date | None = None,
    standard_months: int = DEFAULT_STANDARD_DEPOSIT_MONTHS,
) -> list[ScheduleEntry]:
    """
    Compute the installment plan for a final (post-discount) price.

    Every entry but the last is its percentage of the exact price rounded to
    cents; the last entry takes the remainder so the plan sums to the price.

    Args:
        final_price: Price after discount, before VAT
        payment_type: 'full' or 'scheduled'
        months_until_start: Whole months from booking to retreat start
        booking_date: Resolves the due date of entries due at booking
        retreat_start: Resolves the due date of entries before start
        standard_months: Lead time that qualifies for the 10% deposit

    Returns:
        Ordered ScheduleEntry list; the first entry is due at booking

    Raises:
        InputAssumptionViolation: On negative price or unknown payment type
    """
    require(final_price >= 0, f"Final price must not be negative: {final_price}")

    rules = select_plan(payment_type, months_until_start, standard_months)
    total = round_currency(final_price)

    entries: list[ScheduleEntry] = []
    allocated = Decimal("0")

    for number, rule in enumerate(rules, start=1):
        if number < len(rules):
            amount = round_currency(percent_of(final_price, rule.percentage))
            allocated += amount
        else:
            amount = total - allocated

        entries.append(
            ScheduleEntry(
                payment_number=number,
                kind=rule.kind,
                percentage=rule.percentage,
                amount_due=amount,
                label=rule.label,
                due_rule_description=describe_due_rule(rule.months_before_start),
                months_before_start=rule.months_before_start,
                due_date=_resolve_due_date(rule, booking_date, retreat_start),
            )
        )

    logger.debug(
        "payment_schedule_planned",
        payment_type=payment_type,
        months_until_start=months_until_start,
        final_price=final_price,
        installments=len(entries),
    )

    return entries


def _resolve_due_date(
    rule: InstallmentRule,
    booking_date: date | None,
    retreat_start: date | None,
) -> date | None:
    if rule.months_before_start is None:
        return booking_date
    if retreat_start is None:
        return None
    return subtract_months(retreat_start, rule.months_before_start)
