# pricing_engine/domain/pricing/service.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from pricing_engine.domain.errors import MissingCheckoutData
from pricing_engine.domain.pricing.cart import aggregate_lines
from pricing_engine.domain.pricing.coupons import apply_coupon
from pricing_engine.domain.pricing.lines import resolve_line
from pricing_engine.domain.pricing.money import CURRENCY_SCALE, Money
from pricing_engine.domain.pricing.schemas import (
    CartLine,
    CheckoutTotals,
    Coupon,
    ShippingPolicy,
    TaxPolicy,
)
from pricing_engine.domain.pricing.shipping import apply_shipping_and_tax
from pricing_engine.domain.pricing.volume import NO_VOLUME_DISCOUNTS, VolumeDiscountPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingPolicies:
    """Every knob the pipeline reads, passed in explicitly."""

    shipping: ShippingPolicy
    tax: TaxPolicy
    volume: VolumeDiscountPolicy = field(default=NO_VOLUME_DISCOUNTS)
    scale: int = CURRENCY_SCALE

    def compute(self, cart: Sequence[CartLine], coupon: Optional[Coupon] = None, now: Optional[datetime] = None) -> CheckoutTotals:
        return compute_totals(cart, coupon, self.shipping, self.tax, self.volume, now=now, scale=self.scale)

    def fingerprint(self) -> str:
        rules = ",".join(rule.model_dump_json() for rule in self.volume.rules)
        return f"{self.shipping.model_dump_json()}|{self.tax.model_dump_json()}|[{rules}]|{self.scale}"


def compute_totals(
    cart: Sequence[CartLine],
    coupon: Optional[Coupon],
    shipping_policy: ShippingPolicy,
    tax_policy: TaxPolicy,
    volume_policy: VolumeDiscountPolicy = NO_VOLUME_DISCOUNTS,
    now: Optional[datetime] = None,
    scale: int = CURRENCY_SCALE,
) -> CheckoutTotals:
    """Seller discount, volume discount, coupon, shipping, tax, in that order."""
    if not cart:
        raise MissingCheckoutData("Cannot price an empty cart")

    resolved = [resolve_line(line, volume_policy, scale) for line in cart]
    subtotals = aggregate_lines(resolved, scale)
    logger.info(
        f"Priced {len(resolved)} lines: original {subtotals.subtotal_original}, "
        f"after seller {subtotals.subtotal_after_seller_discount}, "
        f"after volume {subtotals.subtotal_after_volume_discount}"
    )

    coupon_result = apply_coupon(subtotals.subtotal_after_volume_discount, coupon, now, scale)
    charges = apply_shipping_and_tax(coupon_result.subtotal_after_coupon, shipping_policy, tax_policy, scale)

    total_discount = (
        subtotals.seller_discount_total
        .add(subtotals.volume_discount_total)
        .add(coupon_result.discount_amount)
    )

    def q(money):
        return money.round_half_up(scale).amount

    totals = CheckoutTotals(
        subtotal_original=q(subtotals.subtotal_original),
        subtotal_after_seller_discount=q(subtotals.subtotal_after_seller_discount),
        subtotal_after_volume_discount=q(subtotals.subtotal_after_volume_discount),
        subtotal_after_coupon=q(coupon_result.subtotal_after_coupon),
        shipping_cost=q(charges.shipping_cost),
        tax_amount=q(charges.tax_amount),
        final_total=q(charges.final_total),
        seller_discount_total=q(subtotals.seller_discount_total),
        volume_discount_total=q(subtotals.volume_discount_total),
        coupon_discount_total=q(coupon_result.discount_amount),
        total_discount=q(total_discount),
        coupon_code=coupon.code if coupon is not None else None,
        free_shipping=charges.free_shipping,
        free_shipping_threshold=q(Money.of(shipping_policy.free_threshold)),
        tax_rate_percent=tax_policy.rate_percent,
        lines=tuple(r.to_breakdown() for r in resolved),
    )
    logger.info(
        f"Totals: after coupon {totals.subtotal_after_coupon}, shipping {totals.shipping_cost}, "
        f"tax {totals.tax_amount}, final {totals.final_total}"
    )
    return totals
