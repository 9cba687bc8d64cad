from pricing_engine.core.config import settings
from pricing_engine.db.repositories.checkouts import CheckoutRepository
from pricing_engine.db.repositories.coupons import CouponRepository

coupon_repository = CouponRepository(settings.COUPONS)
checkout_repository = CheckoutRepository()


def get_coupons() -> CouponRepository:
    return coupon_repository


def get_checkouts() -> CheckoutRepository:
    return checkout_repository
