# tests/test_config.py
from decimal import Decimal

import pytest

from pricing_engine.core.config import Settings
from pricing_engine.db.repositories.coupons import CouponRepository, get_coupon_for_code
from pricing_engine.domain.errors import CouponNotFound
from pricing_engine.domain.pricing.schemas import Coupon


def test_default_policies_reproduce_the_worked_total(discounted_line, coupon, now):
    policies = Settings().pricing_policies()

    assert policies.tax.rate_percent == Decimal("15")
    assert policies.shipping.free_threshold == Decimal("50.00")
    assert [r.display_label for r in policies.volume.rules] == ["3+", "6+", "12+"]
    assert policies.compute([discounted_line], coupon, now).final_total == Decimal("8.87")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TAX_RATE_PERCENT", "12")
    monkeypatch.setenv("SHIPPING_ENABLED", "false")
    monkeypatch.setenv("VOLUME_DISCOUNT_TIERS", '[{"min_quantity": 10, "discount_percent": "20"}]')
    monkeypatch.setenv("CHECKOUT_TTL_MINUTES", "15")

    settings = Settings()
    policies = settings.pricing_policies()

    assert policies.tax.rate_percent == Decimal("12")
    assert policies.shipping.enabled is False
    assert policies.volume.best_rule(10).discount_percent == Decimal("20")
    assert policies.volume.best_rule(9) is None
    assert settings.checkout_ttl.total_seconds() == 15 * 60


def test_coupon_lookup_normalizes_codes():
    repo = CouponRepository([Coupon(code="FJZCD3", discount_percent=Decimal("5"))])

    assert get_coupon_for_code(repo, " fjzcd3 ").code == "FJZCD3"
    assert get_coupon_for_code(repo, None) is None
    assert get_coupon_for_code(repo, "") is None
    with pytest.raises(CouponNotFound):
        get_coupon_for_code(repo, "NOPE")
