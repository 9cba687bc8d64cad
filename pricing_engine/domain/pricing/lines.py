# pricing_engine/domain/pricing/lines.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from pricing_engine.domain.errors import InvalidLine
from pricing_engine.domain.pricing.money import CURRENCY_SCALE, HUNDRED, Money
from pricing_engine.domain.pricing.schemas import CartLine, LineBreakdown
from pricing_engine.domain.pricing.volume import NO_VOLUME_DISCOUNTS, VolumeDiscountPolicy


@dataclass(frozen=True)
class ResolvedLine:
    line: CartLine
    line_original: Money
    seller_discount_amount: Money
    after_seller_discount: Money
    volume_discount_percent: Decimal
    volume_tier_label: Optional[str]
    volume_discount_amount: Money
    after_volume_discount: Money

    def to_breakdown(self) -> LineBreakdown:
        return LineBreakdown(
            product_id=self.line.product_id,
            seller_id=self.line.seller_id,
            quantity=self.line.quantity,
            line_original=self.line_original.amount,
            seller_discount_percent=self.line.seller_discount_percent,
            seller_discount_amount=self.seller_discount_amount.amount,
            after_seller_discount=self.after_seller_discount.amount,
            volume_discount_percent=self.volume_discount_percent,
            volume_tier_label=self.volume_tier_label,
            volume_discount_amount=self.volume_discount_amount.amount,
            after_volume_discount=self.after_volume_discount.amount,
        )


def resolve_line(
    line: CartLine,
    volume_policy: VolumeDiscountPolicy = NO_VOLUME_DISCOUNTS,
    scale: int = CURRENCY_SCALE,
) -> ResolvedLine:
    """Seller discount first, then volume discount; one half-up rounding per stage."""
    _check_line(line, scale)

    unit_price = Money.of(line.unit_price)
    line_original = unit_price.times(line.quantity)

    keep_after_seller = HUNDRED - line.seller_discount_percent
    after_seller = line_original.multiply_by_percent(keep_after_seller).round_half_up(scale)
    seller_discount = line_original.subtract(after_seller)

    rule = volume_policy.best_rule(line.quantity)
    if rule is None:
        volume_percent = Decimal("0")
        after_volume = after_seller
    else:
        volume_percent = rule.discount_percent
        after_volume = after_seller.multiply_by_percent(HUNDRED - volume_percent).round_half_up(scale)
    volume_discount = after_seller.subtract(after_volume)

    return ResolvedLine(
        line=line,
        line_original=line_original,
        seller_discount_amount=seller_discount,
        after_seller_discount=after_seller,
        volume_discount_percent=volume_percent,
        volume_tier_label=rule.display_label if rule is not None else None,
        volume_discount_amount=volume_discount,
        after_volume_discount=after_volume,
    )


def _check_line(line: CartLine, scale: int) -> None:
    if line.quantity <= 0:
        raise InvalidLine(f"Quantity for product {line.product_id} must be positive, got {line.quantity}")
    if line.unit_price < 0:
        raise InvalidLine(f"Unit price for product {line.product_id} must not be negative, got {line.unit_price}")
    if line.unit_price != Money.of(line.unit_price).round_half_up(scale).amount:
        raise InvalidLine(f"Unit price for product {line.product_id} is finer than the currency scale: {line.unit_price}")
    if line.seller_discount_percent < 0 or line.seller_discount_percent > 100:
        raise InvalidLine(
            f"Seller discount for product {line.product_id} must be within 0..100, "
            f"got {line.seller_discount_percent}"
        )
