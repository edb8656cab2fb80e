"""Pricing exceptions."""


class PricingError(Exception):
    """Base pricing exception."""

    pass


class InputAssumptionViolation(PricingError, AssertionError):
    """Caller passed data outside the documented input domain.

    This is a programming error upstream (unvalidated promo, negative price,
    unknown payment type). It must surface instead of producing a charge.
    """

    pass


def require(condition: bool, message: str) -> None:
    """Raise InputAssumptionViolation unless condition holds."""
    if not condition:
        raise InputAssumptionViolation(message)
