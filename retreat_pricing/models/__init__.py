"""Pricing models."""

from .pricing import (
    AppliedDiscount,
    BillingContext,
    DiscountLine,
    EarlyBirdDiscount,
    NoDiscount,
    PaymentPlanSelection,
    PriceSummary,
    PromoCode,
    PromoCodeDiscount,
    PromoValidationResult,
    QuoteRequest,
    RoomOffer,
    ScheduleEntry,
)
from .vat import VatConfig, VatResolution

__all__ = [
    "AppliedDiscount",
    "BillingContext",
    "DiscountLine",
    "EarlyBirdDiscount",
    "NoDiscount",
    "PaymentPlanSelection",
    "PriceSummary",
    "PromoCode",
    "PromoCodeDiscount",
    "PromoValidationResult",
    "QuoteRequest",
    "RoomOffer",
    "ScheduleEntry",
    "VatConfig",
    "VatResolution",
]
