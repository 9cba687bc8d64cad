from typing import Dict, Iterable, Optional

from pricing_engine.domain.errors import CouponNotFound
from pricing_engine.domain.pricing.coupons import normalize_code
from pricing_engine.domain.pricing.schemas import Coupon


class CouponRepository:
    """In-process stand-in for the external coupon store, keyed by code."""

    def __init__(self, coupons: Iterable[Coupon] = ()):
        self._coupons: Dict[str, Coupon] = {}
        for coupon in coupons:
            self.add(coupon)

    def add(self, coupon: Coupon) -> Coupon:
        self._coupons[normalize_code(coupon.code)] = coupon
        return coupon

    def get_by_code(self, code: str) -> Optional[Coupon]:
        return self._coupons.get(normalize_code(code))


def get_coupon_for_code(repo: CouponRepository, code: Optional[str]) -> Optional[Coupon]:
    # no code means no coupon; an unknown code is an error, not "no coupon"
    if code is None or not code.strip():
        return None
    coupon = repo.get_by_code(code)
    if coupon is None:
        raise CouponNotFound(f"Coupon {normalize_code(code)} does not exist")
    return coupon
