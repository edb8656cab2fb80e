"""Pricing services."""

from .price_summary import PricingService, assemble_price_summary, create_pricing_service

__all__ = [
    "PricingService",
    "assemble_price_summary",
    "create_pricing_service",
]
