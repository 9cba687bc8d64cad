# pricing_engine/domain/pricing/coupons.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pricing_engine.domain.clock import as_utc, utcnow
from pricing_engine.domain.errors import CouponExpired, CouponInvalid
from pricing_engine.domain.pricing.money import CURRENCY_SCALE, Money
from pricing_engine.domain.pricing.schemas import Coupon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponResult:
    coupon: Optional[Coupon]
    discount_amount: Money
    subtotal_after_coupon: Money


def normalize_code(code: str) -> str:
    return code.strip().upper()


def check_coupon(coupon: Coupon, now: Optional[datetime] = None) -> Coupon:
    """Raise unless ``coupon`` can be applied at ``now``."""
    now = as_utc(now) or utcnow()
    if not coupon.active:
        raise CouponInvalid(f"Coupon {coupon.code} is not active")
    if coupon.expires_at is not None and now > coupon.expires_at:
        raise CouponExpired(f"Coupon {coupon.code} expired at {coupon.expires_at.isoformat()}")
    if coupon.discount_percent < 0 or coupon.discount_percent > 100:
        raise CouponInvalid(f"Coupon {coupon.code} has an out of range percent {coupon.discount_percent}")
    return coupon


def apply_coupon(
    subtotal: Money,
    coupon: Optional[Coupon] = None,
    now: Optional[datetime] = None,
    scale: int = CURRENCY_SCALE,
) -> CouponResult:
    """Inactive or expired coupons raise; only a missing coupon means no discount."""
    if coupon is None:
        return CouponResult(coupon=None, discount_amount=Money.zero().round_half_up(scale), subtotal_after_coupon=subtotal)

    try:
        check_coupon(coupon, now)
    except CouponInvalid as e:
        logger.warning(f"Rejected coupon {coupon.code}: {e.message}")
        raise

    discount = subtotal.multiply_by_percent(coupon.discount_percent).round_half_up(scale)
    return CouponResult(
        coupon=coupon,
        discount_amount=discount,
        subtotal_after_coupon=subtotal.subtract(discount),
    )
