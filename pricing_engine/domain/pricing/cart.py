# pricing_engine/domain/pricing/cart.py
from dataclasses import dataclass
from typing import Sequence, Tuple

from pricing_engine.domain.pricing.lines import ResolvedLine
from pricing_engine.domain.pricing.money import CURRENCY_SCALE, Money, sum_money


@dataclass(frozen=True)
class CartSubtotals:
    lines: Tuple[ResolvedLine, ...]
    subtotal_original: Money
    seller_discount_total: Money
    subtotal_after_seller_discount: Money
    volume_discount_total: Money
    subtotal_after_volume_discount: Money


def aggregate_lines(resolved: Sequence[ResolvedLine], scale: int = CURRENCY_SCALE) -> CartSubtotals:
    resolved = tuple(resolved)
    # discounted per-line values are already rounded, so their sums are exact
    after_volume = sum_money(r.after_volume_discount for r in resolved)
    after_seller = sum_money(r.after_seller_discount for r in resolved)
    original = sum_money(r.line_original for r in resolved).round_half_up(scale)

    return CartSubtotals(
        lines=resolved,
        subtotal_original=original,
        seller_discount_total=original.subtract(after_seller),
        subtotal_after_seller_discount=after_seller,
        volume_discount_total=sum_money(r.volume_discount_amount for r in resolved),
        subtotal_after_volume_discount=after_volume,
    )
