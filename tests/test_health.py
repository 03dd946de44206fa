from datetime import timedelta

from storefront.core.security import create_access_token


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["features"] == {"coupons": True, "loyalty": True}


def test_expired_token_is_rejected(client):
    token = create_access_token("customer-1", expires_delta=timedelta(seconds=-5))
    r = client.get("/api/v1/orders/mine", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_role_read_from_app_metadata(client):
    from jose import jwt
    from storefront.core.config import settings
    token = jwt.encode({"sub": "staff-1", "app_metadata": {"role": "admin"}}, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)
    r = client.get("/api/v1/admin/orders", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
