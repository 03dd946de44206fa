from decimal import Decimal

import pytest

from storefront import models
from storefront.core.config import settings
from storefront.db.session import SessionLocal
from storefront.schemas.checkout import CheckoutRequest
from storefront.services.checkout import assembler
from storefront.services.checkout.assembler import CheckoutRejected, assemble_order
from storefront.services.checkout.validation import full_address, validate_checkout_form
from storefront.services.loyalty import store as loyalty_store


def _request(payload):
    return CheckoutRequest(**payload)


def test_form_gate_lists_missing_fields(payload_builder):
    form = _request(payload_builder(payment_method=None, customer_name="  ", customer_phone="8498876", street=""))
    assert validate_checkout_form(form) == ["payment_method", "customer_name", "customer_phone", "street"]


def test_pickup_does_not_need_address(payload_builder):
    form = _request(payload_builder(delivery_type="pickup", street="", house_number="", neighborhood=""))
    assert validate_checkout_form(form) == []
    assert full_address(form) == ""


def test_full_address_format(payload_builder):
    form = _request(payload_builder(complement="Apto 2"))
    assert full_address(form) == "Rua das Flores, Nº 10, Apto 2 - Centro"


def test_round_trip_order(db, payload_builder, line_builder):
    items = [
        line_builder("X-Burger", unit_price=20, quantity=2),
        line_builder("Açaí 500ml", unit_price=10, quantity=1),
    ]
    result = assemble_order(db, _request(payload_builder(items=items, neighborhood="Centro")))

    order = result.order
    assert result.item_count == 3
    assert order.item_count == 3
    assert Decimal(str(order.subtotal)) == Decimal("50.00")
    assert Decimal(str(order.delivery_fee)) == Decimal("7.00")
    assert Decimal(str(order.total)) == Decimal("57.00")
    assert order.status == "sent"
    assert order.address == "Rua das Flores, Nº 10 - Centro"
    assert len(order.items) == 2
    for row, line in zip(sorted(order.items, key=lambda i: i.id), items):
        assert Decimal(str(row.unit_price)) * row.quantity == Decimal(str(line["unit_price"])) * line["quantity"]


def test_order_item_keeps_sides_and_addons(db, payload_builder, line_builder):
    addons = [
        {"addon_id": "batata", "name": "Batata Frita", "unit_price": 0, "quantity": 1, "is_side": True},
        {"addon_id": "bacon", "name": "Bacon", "unit_price": 4, "quantity": 1},
    ]
    items = [line_builder("X-Tudo", unit_price=28, addons=addons, size_name="Duplo")]
    order = assemble_order(db, _request(payload_builder(items=items, delivery_type="pickup"))).order

    item = order.items[0]
    assert item.product_name == "X-Tudo (Duplo)"
    assert item.extras == "Batata Frita"
    assert [a["name"] for a in item.addons] == ["Batata Frita", "Bacon"]
    assert Decimal(str(order.subtotal)) == Decimal("32.00")


def test_empty_cart_rejected(db, payload_builder):
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(items=[])))
    assert exc.value.reason == "empty_cart"


def test_below_minimum_rejected(db, payload_builder, line_builder):
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(items=[line_builder(unit_price=24.99)])))
    assert exc.value.reason == "below_minimum"
    assert db.query(models.Order).count() == 0


def test_unknown_neighborhood_rejected(db, payload_builder):
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(neighborhood="Atlântida")))
    assert exc.value.reason == "neighborhood_not_served"


def test_coupon_is_revalidated_and_marked(db, payload_builder, make_coupon):
    coupon = make_coupon(code="PROMO15", type="percentage", value=15)
    items = [{"product_id": "p", "product_name": "Combo", "quantity": 1, "unit_price": 40, "addons": []}]
    order = assemble_order(db, _request(payload_builder(items=items, coupon_code="promo15"))).order

    assert order.coupon_code == "PROMO15"
    assert Decimal(str(order.discount)) == Decimal("6.00")
    assert Decimal(str(order.total)) == Decimal("41.00")
    assert coupon.used_by == ["84988760462"]

    # same phone again
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(items=items, coupon_code="PROMO15")))
    assert exc.value.reason == "already_used"


def test_redemption_applied_and_consumed(db, payload_builder, make_reward, give_points):
    reward = make_reward(points_required=10, reward_type="discount_20")
    give_points("c1", 10)
    redemption = loyalty_store.redeem(db, "c1", reward.id).redemption

    result = assemble_order(db, _request(payload_builder(redemption_id=redemption.id)), customer_id="c1")

    assert Decimal(str(result.order.discount)) == Decimal("10.00")
    assert result.order.redemption_id == redemption.id
    assert db.get(models.RewardRedemption, redemption.id).status == "used"


def test_guest_cannot_use_redemption(db, payload_builder):
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(redemption_id=1)))
    assert exc.value.reason == "redemption_requires_login"


def test_failed_insert_rolls_back_coupon_and_redemption(db, payload_builder, make_coupon, make_reward, give_points, monkeypatch):
    coupon = make_coupon(code="ROLL", type="fixed", value=5)
    reward = make_reward(points_required=5, reward_type="free_delivery")
    give_points("c1", 5)
    redemption = loyalty_store.redeem(db, "c1", reward.id).redemption

    def boom(line):
        raise RuntimeError("db went away")

    monkeypatch.setattr(assembler, "_addons_snapshot", boom)
    with pytest.raises(RuntimeError):
        assemble_order(db, _request(payload_builder(coupon_code="ROLL", redemption_id=redemption.id)), customer_id="c1")

    db.expire_all()
    assert db.query(models.Order).count() == 0
    assert db.get(models.RewardRedemption, redemption.id).status == "pending"
    assert db.get(models.Coupon, coupon.id).used_by == []


def test_coupon_rejected_when_feature_off(db, payload_builder, make_coupon, monkeypatch):
    make_coupon(code="PROMO10")
    monkeypatch.setattr(settings, "FEATURE_COUPONS", False)
    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(coupon_code="PROMO10")))
    assert exc.value.reason == "coupons_disabled"


# http

def test_checkout_endpoint_returns_message_and_link(client, payload_builder):
    r = client.post("/api/v1/checkout", json=payload_builder(observation="Sem cebola"))
    assert r.status_code == 200
    body = r.json()
    assert body["item_count"] == 2
    assert body["order"]["total"] == 57.0
    assert "Total: R$ 57,00" in body["message"]
    assert "📝 *Obs:* Sem cebola" in body["message"]
    assert body["whatsapp_url"].startswith(f"https://wa.me/{settings.STORE_WHATSAPP_PHONE}?text=Pedido%20n%C2%BA%20")


def test_checkout_missing_fields_is_422(client, payload_builder):
    r = client.post("/api/v1/checkout", json=payload_builder(customer_name="", house_number=""))
    assert r.status_code == 422
    assert r.json()["detail"]["missing"] == ["customer_name", "house_number"]


def test_checkout_below_minimum_is_400(client, payload_builder, line_builder):
    r = client.post("/api/v1/checkout", json=payload_builder(items=[line_builder(unit_price=10)]))
    assert r.status_code == 400
    assert r.json()["detail"] == "Pedido mínimo de R$ 25,00"


def test_logged_in_checkout_is_linked_to_customer(client, payload_builder, customer_headers):
    r = client.post("/api/v1/checkout", json=payload_builder(), headers=customer_headers)
    assert r.status_code == 200
    assert r.json()["order"]["customer_id"] == "customer-1"

    mine = client.get("/api/v1/orders/mine", headers=customer_headers).json()["items"]
    assert [o["id"] for o in mine] == [r.json()["order"]["id"]]


def test_quote_reports_coupon_error(client, line_builder):
    r = client.post("/api/v1/checkout/quote", json={
        "items": [line_builder(unit_price=40)],
        "delivery_type": "delivery",
        "neighborhood": "Liberdade",
        "coupon_code": "NAOEXISTE",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["coupon_error"] == "Cupom inválido ou inexistente"
    assert body["delivery_fee"] == 9.0
    assert body["total"] == 49.0


def test_quote_with_free_delivery_coupon(client, line_builder, make_coupon):
    make_coupon(code="FRETE", type="free_delivery", value=0)
    r = client.post("/api/v1/checkout/quote", json={
        "items": [line_builder(unit_price=30)],
        "delivery_type": "delivery",
        "neighborhood": "Centro",
        "coupon_code": "frete",
    })
    body = r.json()
    assert body["coupon_code"] == "FRETE"
    assert body["is_free_delivery"] is True
    assert body["delivery_fee"] == 0
    assert body["total"] == 30.0


def test_neighborhoods_endpoint(client):
    r = client.get("/api/v1/checkout/neighborhoods")
    assert r.status_code == 200
    assert {"name": "Centro", "fee": 7.0} in r.json()


def test_coupon_used_by_concurrent_checkout_is_rejected(db, payload_builder, make_coupon):
    coupon = make_coupon(code="UMAVEZ", type="fixed", value=5)
    assert coupon.used_by == []

    # another checkout records the same phone after this session loaded the coupon
    other = SessionLocal()
    other.add(models.CouponUse(coupon_id=coupon.id, phone="84988760462"))
    other.commit()
    other.close()

    with pytest.raises(CheckoutRejected) as exc:
        assemble_order(db, _request(payload_builder(coupon_code="UMAVEZ")))
    assert exc.value.reason == "already_used"
    assert exc.value.message == "Você já utilizou este cupom"

    db.expire_all()
    assert db.query(models.Order).count() == 0
    assert db.query(models.CouponUse).count() == 1


def test_quote_strips_neighborhood_name(client, line_builder):
    r = client.post("/api/v1/checkout/quote", json={
        "items": [line_builder(unit_price=30)],
        "delivery_type": "delivery",
        "neighborhood": " Centro ",
    })
    assert r.json()["delivery_fee"] == 7.0
    assert r.json()["total"] == 37.0
