# pricing_engine/domain/checkout/validator.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pricing_engine.domain.checkout.schemas import REQUIRED_ADDRESS_FIELDS, Address, CheckoutData
from pricing_engine.domain.clock import as_utc, utcnow
from pricing_engine.domain.errors import (
    CheckoutExpired,
    MissingBillingData,
    MissingCheckoutData,
    MissingShippingData,
    MissingTotals,
)
from pricing_engine.domain.pricing.schemas import CheckoutTotals


def is_expired(data: CheckoutData, now: Optional[datetime] = None) -> bool:
    now = as_utc(now) or utcnow()
    return data.expires_at is not None and now >= data.expires_at


def validate_for_pricing(data: Optional[CheckoutData], now: Optional[datetime] = None) -> CheckoutData:
    """Gate every pricing run on complete checkout data.

    Returns ``data`` untouched when it is usable. Expiry is checked before
    anything else, so a stale session fails as ``CheckoutExpired`` even if
    every other field is fine. Nothing is ever filled in with a default.
    """
    if data is None:
        raise MissingCheckoutData("Checkout data is required")
    if data.expires_at is None:
        raise MissingCheckoutData("Checkout data has no expiry")
    if is_expired(data, now):
        raise CheckoutExpired(f"Checkout session {data.session_id} expired at {data.expires_at.isoformat()}")

    if not data.user_id:
        raise MissingCheckoutData("Checkout data has no user")
    if not data.session_id:
        raise MissingCheckoutData("Checkout data has no session id")
    if data.timestamp is None:
        raise MissingCheckoutData("Checkout data has no timestamp")
    if not data.items:
        raise MissingCheckoutData("Checkout data has no items")

    missing = _missing_fields(data.shipping_address)
    if missing:
        raise MissingShippingData(f"Shipping address is missing: {', '.join(missing)}")
    missing = _missing_fields(data.billing_address)
    if missing:
        raise MissingBillingData(f"Billing address is missing: {', '.join(missing)}")
    return data


def validate_for_submission(data: Optional[CheckoutData], now: Optional[datetime] = None) -> CheckoutData:
    validate_for_pricing(data, now)
    require_totals(data)
    return data


def require_totals(data: Optional[CheckoutData]) -> CheckoutTotals:
    if data is None or data.totals is None:
        raise MissingTotals("Checkout data carries no computed totals")
    return data.totals


def require_final_total(data: Optional[CheckoutData]) -> Decimal:
    # payment forms render this amount; there is no fallback figure
    return require_totals(data).final_total


def require_shipping_data(data: Optional[CheckoutData]) -> Address:
    if data is None:
        raise MissingCheckoutData("Checkout data is required")
    missing = _missing_fields(data.shipping_address)
    if missing:
        raise MissingShippingData(f"Shipping address is missing: {', '.join(missing)}")
    return data.shipping_address


def _missing_fields(address: Optional[Address]):
    if address is None:
        return list(REQUIRED_ADDRESS_FIELDS)
    return [
        field for field in REQUIRED_ADDRESS_FIELDS
        if not (getattr(address, field) or "").strip()
    ]
