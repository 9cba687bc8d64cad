# pricing_engine/domain/errors.py


class PricingError(Exception):
    """Base class for every failure raised by the pricing and checkout domain.

    Each subclass carries a stable ``code`` so callers (the HTTP layer, UI
    collaborators) can branch on the kind of failure without parsing text.
    """

    code = "pricing_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidAmount(PricingError):
    code = "invalid_amount"


class InvalidLine(PricingError):
    code = "invalid_line"


class CouponInvalid(PricingError):
    code = "coupon_invalid"


class CouponExpired(CouponInvalid):
    code = "coupon_expired"


class CouponNotFound(CouponInvalid):
    code = "coupon_not_found"


class MissingCheckoutData(PricingError):
    code = "missing_checkout_data"


class MissingShippingData(MissingCheckoutData):
    code = "missing_shipping_data"


class MissingBillingData(MissingCheckoutData):
    code = "missing_billing_data"


class MissingTotals(MissingCheckoutData):
    code = "missing_totals"


class CheckoutExpired(PricingError):
    code = "checkout_expired"


class InvalidCheckoutState(PricingError):
    code = "invalid_checkout_state"


class TotalsMismatch(PricingError):
    code = "totals_mismatch"
