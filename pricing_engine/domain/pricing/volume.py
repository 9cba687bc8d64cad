# pricing_engine/domain/pricing/volume.py
from typing import Iterable, Optional, Tuple

from pricing_engine.domain.errors import InvalidAmount
from pricing_engine.domain.pricing.schemas import VolumeDiscountRule


class VolumeDiscountPolicy:
    def __init__(self, rules: Iterable[VolumeDiscountRule] = ()):
        rules = tuple(rules)
        for rule in rules:
            if rule.min_quantity <= 0:
                raise InvalidAmount(f"Volume rule threshold must be positive, got {rule.min_quantity}")
            if rule.discount_percent < 0 or rule.discount_percent > 100:
                raise InvalidAmount(f"Volume rule percent must be within 0..100, got {rule.discount_percent}")
        self._rules: Tuple[VolumeDiscountRule, ...] = tuple(
            sorted(rules, key=lambda r: (r.min_quantity, r.discount_percent))
        )

    @property
    def rules(self) -> Tuple[VolumeDiscountRule, ...]:
        return self._rules

    # largest threshold not above quantity, ties go to the bigger discount
    def best_rule(self, quantity: int) -> Optional[VolumeDiscountRule]:
        best = None
        for rule in self._rules:
            if rule.min_quantity > quantity:
                break
            best = rule
        return best

    def __repr__(self):
        tiers = ", ".join(f"{r.display_label}={r.discount_percent}%" for r in self._rules)
        return f"VolumeDiscountPolicy({tiers})"


NO_VOLUME_DISCOUNTS = VolumeDiscountPolicy()
