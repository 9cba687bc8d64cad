from datetime import timedelta
from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from pricing_engine.domain.pricing.schemas import Coupon, ShippingPolicy, TaxPolicy, VolumeDiscountRule
from pricing_engine.domain.pricing.service import PricingPolicies
from pricing_engine.domain.pricing.volume import VolumeDiscountPolicy

DEFAULT_VOLUME_TIERS = [
    VolumeDiscountRule(min_quantity=3, discount_percent=Decimal("5"), label="3+"),
    VolumeDiscountRule(min_quantity=6, discount_percent=Decimal("10"), label="6+"),
    VolumeDiscountRule(min_quantity=12, discount_percent=Decimal("15"), label="12+"),
]


class Settings(BaseSettings):
    TAX_RATE_PERCENT: Decimal = Decimal("15")

    SHIPPING_ENABLED: bool = True
    SHIPPING_FLAT_COST: Decimal = Decimal("5.00")
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("50.00")

    VOLUME_DISCOUNT_TIERS: List[VolumeDiscountRule] = DEFAULT_VOLUME_TIERS
    CURRENCY_SCALE: int = 2

    CHECKOUT_TTL_MINUTES: int = 30
    COUPONS: List[Coupon] = []

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def checkout_ttl(self) -> timedelta:
        return timedelta(minutes=self.CHECKOUT_TTL_MINUTES)

    def pricing_policies(self) -> PricingPolicies:
        return PricingPolicies(
            shipping=ShippingPolicy(
                flat_cost=self.SHIPPING_FLAT_COST,
                free_threshold=self.FREE_SHIPPING_THRESHOLD,
                enabled=self.SHIPPING_ENABLED,
            ),
            tax=TaxPolicy(rate_percent=self.TAX_RATE_PERCENT),
            volume=VolumeDiscountPolicy(self.VOLUME_DISCOUNT_TIERS),
            scale=self.CURRENCY_SCALE,
        )


settings = Settings()
