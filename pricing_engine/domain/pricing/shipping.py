# pricing_engine/domain/pricing/shipping.py
from dataclasses import dataclass

from pricing_engine.domain.errors import InvalidAmount
from pricing_engine.domain.pricing.money import CURRENCY_SCALE, Money
from pricing_engine.domain.pricing.schemas import ShippingPolicy, TaxPolicy


@dataclass(frozen=True)
class ShippingAndTax:
    shipping_cost: Money
    free_shipping: bool
    tax_amount: Money
    final_total: Money


def shipping_cost_for(subtotal: Money, policy: ShippingPolicy) -> Money:
    flat_cost = Money.of(policy.flat_cost).require_non_negative("Shipping flat cost")
    threshold = Money.of(policy.free_threshold).require_non_negative("Free shipping threshold")
    if not policy.enabled or subtotal >= threshold:
        return Money.zero()
    return flat_cost


def apply_shipping_and_tax(
    subtotal_after_coupon: Money,
    shipping_policy: ShippingPolicy,
    tax_policy: TaxPolicy,
    scale: int = CURRENCY_SCALE,
) -> ShippingAndTax:
    # tax applies to subtotal + shipping, never to the original subtotal
    if tax_policy.rate_percent < 0 or tax_policy.rate_percent > 100:
        raise InvalidAmount(f"Tax rate must be within 0..100, got {tax_policy.rate_percent}")

    shipping = shipping_cost_for(subtotal_after_coupon, shipping_policy).round_half_up(scale)
    taxable = subtotal_after_coupon.add(shipping)
    tax = taxable.multiply_by_percent(tax_policy.rate_percent).round_half_up(scale)

    return ShippingAndTax(
        shipping_cost=shipping,
        free_shipping=shipping.is_zero,
        tax_amount=tax,
        final_total=taxable.add(tax),
    )
