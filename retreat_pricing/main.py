"""Command line entry point for the retreat pricing engine."""

import json
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import ValidationError

from retreat_pricing.config import get_settings
from retreat_pricing.errors import PricingError, require
from retreat_pricing.models.pricing import BillingContext, QuoteRequest
from retreat_pricing.services.discount_resolver import months_until
from retreat_pricing.services.payment_schedule import plan_payment_schedule
from retreat_pricing.services.price_summary import create_pricing_service
from retreat_pricing.services.vat_resolver import resolve_vat_rate
from retreat_pricing.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

USAGE = """Usage:
  python -m retreat_pricing.main quote <request.json>
  python -m retreat_pricing.main vat <COUNTRY> [business] [validated]
  python -m retreat_pricing.main schedule <price> <YYYY-MM-DD start> [full|scheduled] [YYYY-MM-DD booking]
"""


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_quote(args: list[str]) -> None:
    """Price a booking described by a QuoteRequest JSON file."""
    if len(args) != 1:
        raise ValueError("quote expects exactly one JSON file")

    request = QuoteRequest.model_validate_json(Path(args[0]).read_text(encoding="utf-8"))
    summary = create_pricing_service().quote_request(request)
    print(summary.model_dump_json(indent=2))


def cmd_vat(args: list[str]) -> None:
    """Resolve the VAT rate for a country and customer type."""
    if not args:
        raise ValueError("vat expects a country code")

    flags = {arg.lower() for arg in args[1:]}
    billing = BillingContext(
        country=args[0],
        customer_type="business" if "business" in flags else "private",
        vat_id_validated="validated" in flags,
    )
    resolution = resolve_vat_rate(billing, get_settings().pricing.to_vat_config())
    print(resolution.model_dump_json(indent=2))


def cmd_schedule(args: list[str]) -> None:
    """Print the payment plan for a price and retreat start date."""
    if len(args) < 2:
        raise ValueError("schedule expects a price and a start date")

    try:
        price = Decimal(args[0])
    except InvalidOperation as e:
        raise ValueError(f"Invalid price: {args[0]}") from e

    retreat_start = date.fromisoformat(args[1])
    payment_type = args[2] if len(args) > 2 else "scheduled"
    booking_date = date.fromisoformat(args[3]) if len(args) > 3 else date.today()
    require(
        retreat_start >= booking_date,
        f"Retreat start {retreat_start} is before booking date {booking_date}",
    )

    entries = plan_payment_schedule(
        price,
        payment_type,
        months_until(booking_date, retreat_start),
        booking_date=booking_date,
        retreat_start=retreat_start,
        standard_months=get_settings().pricing.standard_deposit_months,
    )
    print(json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2))


COMMANDS = {
    "quote": cmd_quote,
    "vat": cmd_vat,
    "schedule": cmd_schedule,
}


# =============================================================================
# Main
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        print(USAGE, file=sys.stderr)
        return 1

    command, args = argv[0], argv[1:]

    try:
        COMMANDS[command](args)
    except (PricingError, ValidationError, ValueError, OSError) as e:
        logger.error("command_failed", command=command, error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
