# pricing_engine/domain/checkout/service.py
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from pricing_engine.domain.checkout.schemas import CheckoutCreate, CheckoutData, CheckoutState
from pricing_engine.domain.checkout.validator import (
    is_expired,
    validate_for_pricing,
    validate_for_submission,
)
from pricing_engine.domain.clock import as_utc, utcnow
from pricing_engine.domain.errors import (
    CheckoutExpired,
    InvalidCheckoutState,
    MissingCheckoutData,
    TotalsMismatch,
)
from pricing_engine.domain.pricing.schemas import CheckoutTotals, Coupon
from pricing_engine.domain.pricing.service import PricingPolicies

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)


def open_checkout(
    data: CheckoutCreate,
    now: Optional[datetime] = None,
    ttl: timedelta = DEFAULT_TTL,
) -> CheckoutData:
    now = as_utc(now) or utcnow()
    if not data.user_id:
        raise MissingCheckoutData("A checkout session needs a user")

    checkout = CheckoutData(
        user_id=data.user_id,
        shipping_address=data.shipping_address,
        billing_address=data.billing_address,
        items=list(data.items),
        coupon_code=data.coupon_code,
        session_id=f"checkout_{data.user_id}_{int(now.timestamp() * 1000)}",
        timestamp=now,
        expires_at=now + ttl,
        state=CheckoutState.DRAFT,
    )
    logger.info(f"Opened checkout {checkout.session_id}, expires at {checkout.expires_at.isoformat()}")
    return checkout


def price_checkout(
    checkout: CheckoutData,
    coupon: Optional[Coupon],
    policies: PricingPolicies,
    now: Optional[datetime] = None,
    ttl: timedelta = DEFAULT_TTL,
) -> CheckoutTotals:
    """Validate the session and attach its totals (Draft/Validated -> Validated).

    Pricing the same inputs again returns the attached totals unchanged.
    Different inputs replace the totals and start a new expiry window, since
    the amount a customer saw is no longer the amount they would pay.
    """
    now = as_utc(now) or utcnow()
    if checkout.state not in (CheckoutState.DRAFT, CheckoutState.VALIDATED):
        raise InvalidCheckoutState(f"Cannot price a checkout in state {checkout.state.value}")

    try:
        validate_for_pricing(checkout, now)
    except CheckoutExpired:
        _reset_to_draft(checkout)
        checkout.state = CheckoutState.EXPIRED
        logger.warning(f"Checkout {checkout.session_id} expired before pricing")
        raise

    fingerprint = _fingerprint(checkout, coupon, policies)
    if checkout.totals is not None and checkout._pricing_fingerprint == fingerprint:
        return checkout.totals

    totals = policies.compute(checkout.items, coupon, now)

    if checkout.totals is not None:
        checkout.expires_at = now + ttl
        logger.info(f"Checkout {checkout.session_id} repriced, expiry renewed to {checkout.expires_at.isoformat()}")

    checkout.totals = totals
    checkout.coupon_code = coupon.code if coupon is not None else None
    checkout.validated_at = now
    checkout.state = CheckoutState.VALIDATED
    checkout._pricing_fingerprint = fingerprint
    return totals


def submit_checkout(
    checkout: CheckoutData,
    amount: Optional[Decimal] = None,
    now: Optional[datetime] = None,
) -> CheckoutData:
    """Validated -> Submitted, only while the session is still live.

    A late submission drops the totals and sends the session back to Draft.
    When ``amount`` is given it must equal the computed final total exactly.
    """
    now = as_utc(now) or utcnow()
    if checkout.state != CheckoutState.VALIDATED:
        raise InvalidCheckoutState(f"Cannot submit a checkout in state {checkout.state.value}")

    if is_expired(checkout, now):
        _reset_to_draft(checkout)
        logger.warning(f"Checkout {checkout.session_id} submitted after expiry, back to DRAFT")
        raise CheckoutExpired(f"Checkout session {checkout.session_id} expired at {checkout.expires_at.isoformat()}")

    validate_for_submission(checkout, now)
    if amount is not None and Decimal(amount) != checkout.totals.final_total:
        raise TotalsMismatch(f"Submitted amount {amount} does not match computed total {checkout.totals.final_total}")

    checkout.state = CheckoutState.SUBMITTED
    logger.info(f"Checkout {checkout.session_id} submitted for {checkout.totals.final_total}")
    return checkout


def renew_checkout(
    checkout: CheckoutData,
    now: Optional[datetime] = None,
    ttl: timedelta = DEFAULT_TTL,
) -> CheckoutData:
    now = as_utc(now) or utcnow()
    if checkout.state not in (CheckoutState.DRAFT, CheckoutState.EXPIRED):
        raise InvalidCheckoutState(f"Only DRAFT or EXPIRED checkouts can be renewed, not {checkout.state.value}")

    _reset_to_draft(checkout)
    checkout.timestamp = now
    checkout.expires_at = now + ttl
    logger.info(f"Checkout {checkout.session_id} renewed until {checkout.expires_at.isoformat()}")
    return checkout


def _reset_to_draft(checkout: CheckoutData) -> None:
    checkout.totals = None
    checkout.validated_at = None
    checkout.state = CheckoutState.DRAFT
    checkout._pricing_fingerprint = None


def _fingerprint(checkout: CheckoutData, coupon: Optional[Coupon], policies: PricingPolicies) -> str:
    items = ",".join(line.model_dump_json() for line in checkout.items)
    coupon_part = coupon.model_dump_json() if coupon is not None else "-"
    return f"[{items}]|{coupon_part}|{policies.fingerprint()}"
