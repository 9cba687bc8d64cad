# tests/conftest.py
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pricing_engine.domain.checkout.schemas import Address, CheckoutCreate
from pricing_engine.domain.pricing.schemas import (
    CartLine,
    Coupon,
    ShippingPolicy,
    TaxPolicy,
    VolumeDiscountRule,
)
from pricing_engine.domain.pricing.service import PricingPolicies
from pricing_engine.domain.pricing.volume import VolumeDiscountPolicy


@pytest.fixture
def now():
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def volume_policy():
    return VolumeDiscountPolicy([
        VolumeDiscountRule(min_quantity=3, discount_percent=Decimal("5"), label="3+"),
        VolumeDiscountRule(min_quantity=6, discount_percent=Decimal("10"), label="6+"),
        VolumeDiscountRule(min_quantity=12, discount_percent=Decimal("15"), label="12+"),
    ])


@pytest.fixture
def policies(volume_policy):
    # free-shipping threshold kept high so the flat cost applies
    return PricingPolicies(
        shipping=ShippingPolicy(flat_cost=Decimal("5.00"), free_threshold=Decimal("1000.00")),
        tax=TaxPolicy(rate_percent=Decimal("15")),
        volume=volume_policy,
    )


@pytest.fixture
def discounted_line():
    # $2.00 x 3 with a 50% seller markdown
    return CartLine(
        product_id="54",
        seller_id="s1",
        unit_price=Decimal("2.00"),
        quantity=3,
        seller_discount_percent=Decimal("50"),
    )


@pytest.fixture
def coupon():
    return Coupon(code="FJZCD3", discount_percent=Decimal("5"))


@pytest.fixture
def address():
    return Address(
        name="Juan Perez",
        email="juan@example.com",
        phone="0999999999",
        street="Av. Amazonas 123",
        city="Quito",
        country="Ecuador",
        identification="1234567890",
    )


@pytest.fixture
def checkout_create(address, discounted_line):
    return CheckoutCreate(
        user_id="123",
        shipping_address=address,
        billing_address=address,
        items=[discounted_line],
    )
