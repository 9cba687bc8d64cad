# pricing_engine/api/v1/routes_checkout.py
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from pricing_engine.core.config import settings
from pricing_engine.db.base import get_checkouts, get_coupons
from pricing_engine.db.repositories.checkouts import CheckoutRepository
from pricing_engine.db.repositories.coupons import CouponRepository, get_coupon_for_code
from pricing_engine.domain.checkout.schemas import (
    CheckoutCreate,
    CheckoutData,
    PriceRequest,
    SubmitRequest,
    TotalsRequest,
)
from pricing_engine.domain.checkout.service import open_checkout, price_checkout, renew_checkout, submit_checkout
from pricing_engine.domain.clock import utcnow
from pricing_engine.domain.errors import (
    CheckoutExpired,
    CouponInvalid,
    InvalidCheckoutState,
    PricingError,
    TotalsMismatch,
)
from pricing_engine.domain.pricing.schemas import CheckoutTotals
from pricing_engine.domain.pricing.service import PricingPolicies


router = APIRouter(prefix="/api/v1/checkout", tags=["checkout"])


def get_policies() -> PricingPolicies:
    return settings.pricing_policies()


def get_now() -> datetime:
    return utcnow()


def http_error(e: PricingError) -> HTTPException:
    if isinstance(e, CheckoutExpired):
        status = 410
    elif isinstance(e, (InvalidCheckoutState, TotalsMismatch)):
        status = 409
    elif isinstance(e, CouponInvalid):
        status = 400
    else:
        status = 422
    return HTTPException(status, detail={"code": e.code, "message": e.message})


def _load(checkouts: CheckoutRepository, session_id: str) -> CheckoutData:
    checkout = checkouts.get(session_id)
    if checkout is None:
        raise HTTPException(404, "Checkout session not found")
    return checkout


@router.post("/totals", response_model=CheckoutTotals)
async def compute_totals_endpoint(
    payload: TotalsRequest,
    coupons: CouponRepository = Depends(get_coupons),
    policies: PricingPolicies = Depends(get_policies),
    now: datetime = Depends(get_now),
):
    try:
        coupon = get_coupon_for_code(coupons, payload.coupon_code)
        return policies.compute(payload.items, coupon, now)
    except PricingError as e:
        raise http_error(e)


@router.post("/sessions", response_model=CheckoutData)
async def open_checkout_endpoint(
    payload: CheckoutCreate,
    checkouts: CheckoutRepository = Depends(get_checkouts),
    now: datetime = Depends(get_now),
):
    try:
        checkout = open_checkout(payload, now, settings.checkout_ttl)
    except PricingError as e:
        raise http_error(e)
    return checkouts.save(checkout)


@router.post("/sessions/{session_id}/price", response_model=CheckoutData)
async def price_checkout_endpoint(
    session_id: str,
    payload: PriceRequest,
    checkouts: CheckoutRepository = Depends(get_checkouts),
    coupons: CouponRepository = Depends(get_coupons),
    policies: PricingPolicies = Depends(get_policies),
    now: datetime = Depends(get_now),
):
    checkout = _load(checkouts, session_id)
    try:
        coupon = get_coupon_for_code(coupons, payload.coupon_code)
        price_checkout(checkout, coupon, policies, now, settings.checkout_ttl)
    except PricingError as e:
        raise http_error(e)
    return checkout


@router.post("/sessions/{session_id}/submit", response_model=CheckoutData)
async def submit_checkout_endpoint(
    session_id: str,
    payload: SubmitRequest,
    checkouts: CheckoutRepository = Depends(get_checkouts),
    now: datetime = Depends(get_now),
):
    checkout = _load(checkouts, session_id)
    try:
        submit_checkout(checkout, payload.amount, now)
    except PricingError as e:
        raise http_error(e)
    return checkout


@router.post("/sessions/{session_id}/renew", response_model=CheckoutData)
async def renew_checkout_endpoint(
    session_id: str,
    checkouts: CheckoutRepository = Depends(get_checkouts),
    now: datetime = Depends(get_now),
):
    checkout = _load(checkouts, session_id)
    try:
        renew_checkout(checkout, now, settings.checkout_ttl)
    except PricingError as e:
        raise http_error(e)
    return checkout
