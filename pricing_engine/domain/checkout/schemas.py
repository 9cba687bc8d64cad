# pricing_engine/domain/checkout/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, PrivateAttr, field_validator

from pricing_engine.domain.clock import as_utc
from pricing_engine.domain.pricing.schemas import CartLine, CheckoutTotals


class CheckoutState(str, Enum):
    DRAFT = "DRAFT"
    VALIDATED = "VALIDATED"
    SUBMITTED = "SUBMITTED"
    EXPIRED = "EXPIRED"


class Address(BaseModel):
    # every field is optional here; the validator decides what is missing
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    identification: Optional[str] = None


REQUIRED_ADDRESS_FIELDS = ("name", "email", "phone", "street", "city", "country", "identification")


class CheckoutData(BaseModel):
    """Snapshot of one checkout session.

    Fields the UI may fail to supply are typed ``Optional`` on purpose: absence
    must reach the validator and fail there by name, never be coerced into an
    empty address or a zero total while the model is being built.
    """

    user_id: Optional[str] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    items: List[CartLine] = []
    coupon_code: Optional[str] = None
    totals: Optional[CheckoutTotals] = None

    session_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    validated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    state: CheckoutState = CheckoutState.DRAFT

    _pricing_fingerprint: Optional[str] = PrivateAttr(default=None)

    @field_validator("timestamp", "validated_at", "expires_at")
    @classmethod
    def _utc(cls, value):
        return as_utc(value)


class CheckoutCreate(BaseModel):
    user_id: Optional[str] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    items: List[CartLine] = []
    coupon_code: Optional[str] = None


class TotalsRequest(BaseModel):
    items: List[CartLine]
    coupon_code: Optional[str] = None


class PriceRequest(BaseModel):
    coupon_code: Optional[str] = None


class SubmitRequest(BaseModel):
    amount: Optional[Decimal] = None
