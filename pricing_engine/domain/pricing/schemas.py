# pricing_engine/domain/pricing/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pricing_engine.domain.clock import as_utc


class Product(BaseModel):
    """Read-only catalog reference, supplied by the cart/catalog service."""

    model_config = ConfigDict(frozen=True)

    id: str
    base_price: Decimal
    seller_discount_percent: Decimal = Decimal("0")


class CartLine(BaseModel):
    # bounds are checked by the line resolver so bad rows fail as InvalidLine
    model_config = ConfigDict(frozen=True)

    product_id: str
    seller_id: str
    unit_price: Decimal
    quantity: int
    seller_discount_percent: Decimal = Decimal("0")

    @classmethod
    def from_product(cls, product: Product, seller_id: str, quantity: int) -> "CartLine":
        return cls(
            product_id=product.id,
            seller_id=seller_id,
            unit_price=product.base_price,
            quantity=quantity,
            seller_discount_percent=product.seller_discount_percent,
        )


class VolumeDiscountRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_quantity: int
    discount_percent: Decimal
    label: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or f"{self.min_quantity}+"


class Coupon(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    discount_percent: Decimal
    active: bool = True
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def _expires_at_utc(cls, value):
        return as_utc(value)


class ShippingPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    flat_cost: Decimal
    free_threshold: Decimal
    enabled: bool = True


class TaxPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate_percent: Decimal


class LineBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    seller_id: str
    quantity: int
    line_original: Decimal
    seller_discount_percent: Decimal
    seller_discount_amount: Decimal
    after_seller_discount: Decimal
    volume_discount_percent: Decimal
    volume_tier_label: Optional[str] = None
    volume_discount_amount: Decimal
    after_volume_discount: Decimal


class CheckoutTotals(BaseModel):
    """Itemized result of one pricing run. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    subtotal_original: Decimal
    subtotal_after_seller_discount: Decimal
    subtotal_after_volume_discount: Decimal
    subtotal_after_coupon: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    final_total: Decimal

    seller_discount_total: Decimal
    volume_discount_total: Decimal
    coupon_discount_total: Decimal
    total_discount: Decimal

    coupon_code: Optional[str] = None
    free_shipping: bool
    free_shipping_threshold: Decimal
    tax_rate_percent: Decimal
    lines: Tuple[LineBreakdown, ...] = ()

    @model_validator(mode="after")
    def _final_total_is_exact(self):
        expected = self.subtotal_after_coupon + self.shipping_cost + self.tax_amount
        if self.final_total != expected:
            raise ValueError(
                f"final_total {self.final_total} != subtotal_after_coupon + shipping + tax ({expected})"
            )
        return self
