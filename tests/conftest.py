import os

# must be set before storefront is imported, settings are read at import time
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret-key-for-storefront"
os.environ["FEATURE_COUPONS"] = "true"
os.environ["FEATURE_LOYALTY"] = "true"
os.environ.pop("AUTH_JWT_AUDIENCE", None)

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront import models
from storefront.core.security import create_access_token
from storefront.db.base import Base
from storefront.db.session import SessionLocal, engine, get_db
from storefront.main import app


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def customer_headers():
    token = create_access_token("customer-1", email="cliente@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers():
    token = create_access_token("admin-1", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_coupon(db):
    def _make(code="PROMO10", type="percentage", value=10, is_active=True, expires_at=None, used_by=()):
        coupon = models.Coupon(code=code, type=type, value=Decimal(str(value)), is_active=is_active, expires_at=expires_at)
        for phone in used_by:
            coupon.uses.append(models.CouponUse(phone=phone))
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon
    return _make


@pytest.fixture()
def make_reward(db):
    def _make(name="Desconto 20%", points_required=10, reward_type="discount_20", is_active=True):
        reward = models.Reward(name=name, points_required=points_required, reward_type=reward_type, is_active=is_active)
        db.add(reward)
        db.commit()
        db.refresh(reward)
        return reward
    return _make


@pytest.fixture()
def give_points(db):
    def _give(customer_id, points, description="+pontos"):
        db.add(models.LoyaltyPoint(customer_id=customer_id, points=points, description=description))
        db.commit()
    return _give


@pytest.fixture()
def make_order(db):
    def _make(status="sent", customer_id=None, total=50, item_count=2, payment_method="pix",
              delivery_type="delivery", created_at=None):
        order = models.Order(
            number="12345",
            customer_id=customer_id,
            customer_name="Maria",
            customer_phone="84988760462",
            delivery_type=delivery_type,
            delivery_fee=Decimal("7"),
            subtotal=Decimal(str(total)),
            discount=Decimal("0"),
            total=Decimal(str(total)),
            payment_method=payment_method,
            status=status,
            item_count=item_count,
            created_at=created_at or datetime.utcnow(),
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order
    return _make


def cart_line(product_name="X-Burger", unit_price=25, quantity=1, addons=None, **extra):
    line = {
        "product_id": extra.pop("product_id", product_name.lower().replace(" ", "-")),
        "product_name": product_name,
        "quantity": quantity,
        "unit_price": unit_price,
        "addons": addons or [],
    }
    line.update(extra)
    return line


def checkout_payload(items=None, **overrides):
    payload = {
        "items": items if items is not None else [cart_line(unit_price=25, quantity=2)],
        "payment_method": "pix",
        "delivery_type": "delivery",
        "customer_name": "Maria Silva",
        "customer_phone": "(84) 9 8876-0462",
        "street": "Rua das Flores",
        "house_number": "10",
        "complement": "",
        "neighborhood": "Centro",
        "reference_point": "",
        "observation": "",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def payload_builder():
    return checkout_payload


@pytest.fixture()
def line_builder():
    return cart_line
