import pytest

from storefront import models
from storefront.services.loyalty import store as loyalty_store
from storefront.services.orders import status as order_status
from storefront.services.orders.status import InvalidStatusTransition


def test_next_status_walks_the_flow():
    assert order_status.next_status("sent") == "preparing"
    assert order_status.next_status("delivered") == "completed"
    assert order_status.next_status("completed") is None
    assert order_status.next_status("cancelled") is None


def test_advance_to_completed_awards_points_once(db, make_order):
    order = make_order(status="delivered", customer_id="c1", item_count=4)

    change = order_status.advance(db, order)

    assert change.previous == "delivered"
    assert order.status == "completed"
    assert change.points_awarded == 4
    assert loyalty_store.balance(db, "c1") == 4
    with pytest.raises(InvalidStatusTransition):
        order_status.advance(db, order)
    assert loyalty_store.balance(db, "c1") == 4


def test_guest_order_completes_without_points(db, make_order):
    order = make_order(status="delivered", customer_id=None)
    change = order_status.advance(db, order)
    assert change.points_awarded == 0
    assert db.query(models.LoyaltyPoint).count() == 0


def test_cancel_from_active_status(db, make_order):
    order = make_order(status="preparing")
    change = order_status.cancel(db, order)
    assert change.previous == "preparing"
    assert order.status == "cancelled"


@pytest.mark.parametrize("status", ["completed", "cancelled"])
def test_terminal_orders_cannot_be_cancelled(db, make_order, status):
    order = make_order(status=status)
    with pytest.raises(InvalidStatusTransition):
        order_status.cancel(db, order)


def test_list_orders_views(db, make_order):
    make_order(status="sent")
    make_order(status="preparing")
    make_order(status="completed")
    make_order(status="cancelled")
    assert len(order_status.list_orders(db, view="active")) == 2
    assert len(order_status.list_orders(db, view="all")) == 4
    assert [o.status for o in order_status.list_orders(db, view="completed")] == ["completed"]


# http

def test_admin_advance_and_cancel(client, admin_headers, make_order):
    order = make_order(status="sent", customer_id="c9", item_count=2)

    r = client.post(f"/api/v1/admin/orders/{order.id}/advance", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["previous_status"] == "sent"
    assert body["status"] == "preparing"
    assert body["status_label"] == "Preparando"

    r = client.post(f"/api/v1/admin/orders/{order.id}/cancel", headers=admin_headers)
    assert r.json()["status_label"] == "Cancelado"

    r = client.post(f"/api/v1/admin/orders/{order.id}/advance", headers=admin_headers)
    assert r.status_code == 400


def test_admin_order_filters(client, admin_headers, make_order):
    make_order(status="sent")
    make_order(status="completed")
    assert len(client.get("/api/v1/admin/orders", headers=admin_headers).json()) == 1
    assert len(client.get("/api/v1/admin/orders", params={"filter": "all"}, headers=admin_headers).json()) == 2
    assert client.get("/api/v1/admin/orders", params={"filter": "lost"}, headers=admin_headers).status_code == 400
    assert client.get("/api/v1/admin/orders/999", headers=admin_headers).status_code == 404


def test_customer_cannot_see_other_orders(client, customer_headers, make_order):
    mine = make_order(customer_id="customer-1")
    theirs = make_order(customer_id="someone-else")
    assert client.get(f"/api/v1/orders/{mine.id}", headers=customer_headers).status_code == 200
    assert client.get(f"/api/v1/orders/{theirs.id}", headers=customer_headers).status_code == 404
