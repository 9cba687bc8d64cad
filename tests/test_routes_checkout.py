# tests/test_routes_checkout.py
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pricing_engine.api.v1.routes_checkout import get_now, get_policies
from pricing_engine.db.base import get_checkouts, get_coupons
from pricing_engine.db.repositories.checkouts import CheckoutRepository
from pricing_engine.db.repositories.coupons import CouponRepository
from pricing_engine.domain.pricing.schemas import Coupon
from pricing_engine.main import app

LINE = {
    "product_id": "54",
    "seller_id": "s1",
    "unit_price": "2.00",
    "quantity": 3,
    "seller_discount_percent": "50",
}
ADDRESS = {
    "name": "Juan Perez",
    "email": "juan@example.com",
    "phone": "0999999999",
    "street": "Av. Amazonas 123",
    "city": "Quito",
    "country": "Ecuador",
    "identification": "1234567890",
}


@pytest.fixture
def client(now, policies):
    coupons = CouponRepository([
        Coupon(code="FJZCD3", discount_percent=Decimal("5")),
        Coupon(code="OLD", discount_percent=Decimal("5"), expires_at=now - timedelta(days=1)),
    ])
    checkouts = CheckoutRepository()

    app.dependency_overrides[get_now] = lambda: now
    app.dependency_overrides[get_policies] = lambda: policies
    app.dependency_overrides[get_coupons] = lambda: coupons
    app.dependency_overrides[get_checkouts] = lambda: checkouts
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_totals_endpoint(client):
    r = client.post("/api/v1/checkout/totals", json={"items": [LINE], "coupon_code": "fjzcd3"})

    assert r.status_code == 200
    body = r.json()
    assert Decimal(body["subtotal_after_coupon"]) == Decimal("2.71")
    assert Decimal(body["tax_amount"]) == Decimal("1.16")
    assert Decimal(body["final_total"]) == Decimal("8.87")
    assert body["coupon_code"] == "FJZCD3"


def test_totals_with_expired_coupon(client):
    r = client.post("/api/v1/checkout/totals", json={"items": [LINE], "coupon_code": "OLD"})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "coupon_expired"


def test_totals_with_unknown_coupon(client):
    r = client.post("/api/v1/checkout/totals", json={"items": [LINE], "coupon_code": "NOPE"})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "coupon_not_found"


def test_totals_with_bad_line(client):
    r = client.post("/api/v1/checkout/totals", json={"items": [dict(LINE, quantity=0)]})
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "invalid_line"


def test_session_flow(client):
    r = client.post("/api/v1/checkout/sessions", json={
        "user_id": "123",
        "shipping_address": ADDRESS,
        "billing_address": ADDRESS,
        "items": [LINE],
    })
    assert r.status_code == 200
    session_id = r.json()["session_id"]
    assert r.json()["state"] == "DRAFT"

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/price", json={"coupon_code": "FJZCD3"})
    assert r.status_code == 200
    assert r.json()["state"] == "VALIDATED"
    assert Decimal(r.json()["totals"]["final_total"]) == Decimal("8.87")

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/submit", json={"amount": "8.80"})
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "totals_mismatch"

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/submit", json={"amount": "8.87"})
    assert r.status_code == 200
    assert r.json()["state"] == "SUBMITTED"


def test_expired_session_can_be_renewed(client, now):
    r = client.post("/api/v1/checkout/sessions", json={
        "user_id": "123",
        "shipping_address": ADDRESS,
        "billing_address": ADDRESS,
        "items": [LINE],
    })
    session_id = r.json()["session_id"]

    later = now + timedelta(days=1)
    app.dependency_overrides[get_now] = lambda: later

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/price", json={"coupon_code": "FJZCD3"})
    assert r.status_code == 410
    assert r.json()["detail"]["code"] == "checkout_expired"

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/renew")
    assert r.status_code == 200
    assert r.json()["state"] == "DRAFT"
    assert r.json()["totals"] is None

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/price", json={"coupon_code": "FJZCD3"})
    assert r.status_code == 200
    assert r.json()["state"] == "VALIDATED"
    assert Decimal(r.json()["totals"]["final_total"]) == Decimal("8.87")

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/renew")
    assert r.status_code == 409


def test_pricing_session_without_shipping(client):
    r = client.post("/api/v1/checkout/sessions", json={
        "user_id": "123",
        "billing_address": ADDRESS,
        "items": [LINE],
    })
    session_id = r.json()["session_id"]

    r = client.post(f"/api/v1/checkout/sessions/{session_id}/price", json={})
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "missing_shipping_data"


def test_unknown_session(client):
    r = client.post("/api/v1/checkout/sessions/missing/submit", json={})
    assert r.status_code == 404
