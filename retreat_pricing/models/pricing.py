"""Pydantic models for booking price and payment schedule data."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


DiscountSource = Literal["promo_code", "early_bird"]
PaymentType = Literal["full", "scheduled"]
CustomerType = Literal["private", "business"]
ScheduleKind = Literal[
    "full",
    "deposit",
    "second",
    "balance",
    "late_first",
    "late_second",
]


# =============================================================================
# Inputs
# =============================================================================


class RoomOffer(BaseModel):
    """Room price snapshot fetched for one booking attempt."""

    model_config = ConfigDict(frozen=True)

    regular_price: Decimal = Field(ge=0)
    early_bird_price: Decimal | None = Field(default=None, ge=0)
    early_bird_enabled: bool = False
    deposit_price: Decimal = Field(default=Decimal("0"), ge=0)

    # Last day for early bird on top of the month cutoff; None = cutoff only
    early_bird_deadline: date | None = None

    @property
    def has_early_bird(self) -> bool:
        """Room offers an early bird price at all."""
        return self.early_bird_enabled and self.early_bird_price is not None


class PromoCode(BaseModel):
    """Promo code definition as stored by the admin dashboard."""

    code: str
    discount_type: Literal["percentage", "fixed"]
    discount_value: Decimal = Field(ge=0)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class PromoValidationResult(BaseModel):
    """Server-side promo decision, already compared against early bird."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    source: DiscountSource | None = None
    promo_discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    early_bird_discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    is_early_bird_eligible: bool = False

    code: str | None = None
    error: str | None = None


class BillingContext(BaseModel):
    """Billing details that drive VAT selection."""

    model_config = ConfigDict(frozen=True)

    country: str = Field(min_length=2, max_length=2)
    customer_type: CustomerType = "private"
    vat_id_validated: bool = False

    @field_validator("country", mode="before")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class PaymentPlanSelection(BaseModel):
    """Payment type chosen at checkout."""

    payment_type: PaymentType = "scheduled"


# =============================================================================
# Discounts (tagged variant on ``kind``)
# =============================================================================


class NoDiscount(BaseModel):
    """No discount applies."""

    kind: Literal["none"] = "none"
    amount: Decimal = Decimal("0")


class EarlyBirdDiscount(BaseModel):
    """Room early bird price applies."""

    kind: Literal["early_bird"] = "early_bird"
    amount: Decimal = Field(gt=0)
    alternative_amount: Decimal = Decimal("0")  # losing promo, if any


class PromoCodeDiscount(BaseModel):
    """Validated promo code applies."""

    kind: Literal["promo_code"] = "promo_code"
    amount: Decimal = Field(ge=0)
    code: str | None = None
    alternative_amount: Decimal = Decimal("0")  # losing early bird, if any


AppliedDiscount = Annotated[
    NoDiscount | EarlyBirdDiscount | PromoCodeDiscount,
    Field(discriminator="kind"),
]


class DiscountAlternative(BaseModel):
    """Non-winning discount, rendered crossed out."""

    source: DiscountSource
    label: str
    amount: Decimal


class DiscountLine(BaseModel):
    """Discount row of the order summary."""

    source: DiscountSource | None = None
    label: str | None = None
    amount: Decimal = Decimal("0")
    alternative: DiscountAlternative | None = None


# =============================================================================
# Outputs
# =============================================================================


class ScheduleEntry(BaseModel):
    """One installment of a payment plan."""

    payment_number: int = Field(ge=1)
    kind: ScheduleKind
    percentage: int = Field(gt=0, le=100)
    amount_due: Decimal
    label: str
    due_rule_description: str

    # None = due at booking
    months_before_start: int | None = None
    due_date: date | None = None

    @property
    def is_due_today(self) -> bool:
        return self.months_before_start is None


class PriceSummary(BaseModel):
    """Complete breakdown shown in the order summary and charged at checkout."""

    currency: str = "EUR"

    subtotal: Decimal
    discount_line: DiscountLine
    final_price: Decimal

    payment_type: PaymentType
    deposit_percentage: int

    vat_rate: Decimal
    is_reverse_charge: bool = False
    vat_amount: Decimal  # on the amount due today
    total_due_today: Decimal

    schedule: list[ScheduleEntry]
    future_installments: list[ScheduleEntry] = Field(default_factory=list)

    # Full-price figures for the booking record
    total_vat_amount: Decimal
    total_amount: Decimal
    balance_due: Decimal


class QuoteRequest(BaseModel):
    """Everything needed to price one booking."""

    room: RoomOffer
    billing: BillingContext
    selection: PaymentPlanSelection = Field(default_factory=PaymentPlanSelection)
    booking_date: date
    retreat_start: date
    promo: PromoValidationResult | None = None
