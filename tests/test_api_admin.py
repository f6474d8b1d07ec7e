import csv
import io
from datetime import timedelta

import pytest

from cloud_kitchen.core.security import hash_password

ADMIN_ENDPOINTS = [
    ("get", "/api/admin/orders"),
    ("get", "/api/admin/orders/export?format=csv"),
    ("get", "/api/admin/analytics/dashboard"),
    ("get", "/api/admin/analytics/orders"),
    ("get", "/api/admin/analytics/customers"),
    ("get", "/api/admin/customers/export?format=json"),
    ("put", "/api/admin/orders/1/status"),
    ("post", "/api/admin/products"),
    ("delete", "/api/admin/products/1"),
]


@pytest.fixture
def customer_client(client, user_repo):
    user_repo.create_user(email="asha@example.com", password_hash=hash_password("s3cret-pass"), name="Asha")
    resp = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    return client


@pytest.fixture
def placed(make_product, place_order):
    rice = make_product("Mandi Rice", "100")
    return place_order([(rice, 2)])


@pytest.mark.parametrize("method, path", ADMIN_ENDPOINTS)
def test_admin_routes_require_a_session(client, method, path):
    resp = getattr(client, method)(path)
    assert resp.status_code == 401


@pytest.mark.parametrize("method, path", ADMIN_ENDPOINTS)
def test_admin_routes_reject_customers(customer_client, method, path):
    resp = getattr(customer_client, method)(path)
    assert resp.status_code == 403
    assert resp.json() == {"message": "Admin access required"}


def test_product_crud(admin_client):
    created = admin_client.post("/api/admin/products", json={
        "name": "Korean Chilli Glaze",
        "description": "Sweet and spicy",
        "price": 39.0,
        "category": "Global Sauces",
        "badges": ["New"],
    })
    assert created.status_code == 201
    product = created.json()
    assert product["price"] == "39"
    assert product["available"] is True

    updated = admin_client.put(f"/api/admin/products/{product['id']}", json={"price": "45.50", "available": False})
    assert updated.status_code == 200
    assert updated.json()["price"] == "45.5"
    assert updated.json()["available"] is False
    assert updated.json()["name"] == "Korean Chilli Glaze"

    deleted = admin_client.delete(f"/api/admin/products/{product['id']}")
    assert deleted.json() == {"message": "Product deleted successfully"}
    assert admin_client.get(f"/api/products/{product['id']}").status_code == 404
    assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 404


def test_product_create_validation(admin_client):
    resp = admin_client.post("/api/admin/products", json={"name": "Free Lunch", "price": "-1", "category": "X"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "price"


def test_status_updates(admin_client, placed):
    path = f"/api/admin/orders/{placed.id}/status"

    ok = admin_client.put(path, json={"status": "confirmed"})
    assert ok.status_code == 200
    assert ok.json()["status"] == "confirmed"

    skipped = admin_client.put(path, json={"status": "delivered"})
    assert skipped.status_code == 409
    assert skipped.json()["field"] == "status"

    unknown = admin_client.put(path, json={"status": "teleported"})
    assert unknown.status_code == 400

    missing = admin_client.put("/api/admin/orders/4242/status", json={"status": "confirmed"})
    assert missing.status_code == 404


def test_payment_update(admin_client, placed):
    resp = admin_client.put(f"/api/admin/orders/{placed.id}/payment",
                            json={"paymentStatus": "paid", "paymentReference": "upi-123"})
    assert resp.status_code == 200
    assert resp.json()["paymentStatus"] == "paid"
    assert resp.json()["paymentReference"] == "upi-123"

    listed = admin_client.get("/api/admin/orders", params={"paymentStatus": "paid"}).json()
    assert [o["id"] for o in listed] == [placed.id]
    assert admin_client.get("/api/admin/orders", params={"paymentStatus": "unpaid"}).json() == []


def test_order_listing_filters(admin_client, make_product, place_order):
    rice = make_product("Mandi Rice", "100")
    asha = place_order([(rice, 1)], name="Asha Rao")
    place_order([(rice, 1)], name="Ravi Kumar", phone="9123456780")

    by_name = admin_client.get("/api/admin/orders", params={"customerName": "asha"}).json()
    assert [o["id"] for o in by_name] == [asha.id]

    page = admin_client.get("/api/admin/orders", params={"limit": 1}).json()
    assert len(page) == 1

    assert admin_client.get("/api/admin/orders", params={"limit": 0}).status_code == 400
    assert admin_client.get("/api/admin/orders", params={"status": "lost"}).status_code == 400


def test_order_export_csv(admin_client, make_product, place_order):
    rice = make_product("Mandi Rice", "100")
    place_order([(rice, 1)], name="Rao, Asha", address='House "Blue Door", 3rd Cross')

    resp = admin_client.get("/api/admin/orders/export", params={"format": "csv"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith("attachment; filename=orders-")
    assert disposition.endswith(".csv")
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[1][1] == "Rao, Asha"
    assert rows[1][4] == 'House "Blue Door", 3rd Cross'


def test_order_export_json_and_bad_format(admin_client, placed):
    resp = admin_client.get("/api/admin/orders/export", params={"format": "json"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.headers["content-disposition"].endswith(".json")
    assert resp.json()[0]["id"] == placed.id

    assert admin_client.get("/api/admin/orders/export", params={"format": "xml"}).status_code == 400
    assert admin_client.get("/api/admin/orders/export").status_code == 400


def test_analytics_endpoints(admin_client, make_product, place_order, set_created_at, clock):
    rice = make_product("Mandi Rice", "250")
    recent = place_order([(rice, 2)], phone="9876543210")
    old = place_order([(rice, 1)], phone="+91 98765 43210")
    set_created_at(recent.id, clock.moment - timedelta(days=1))
    set_created_at(old.id, clock.moment - timedelta(days=45))

    dashboard = admin_client.get("/api/admin/analytics/dashboard").json()
    assert dashboard["totalRevenue"] == 500
    assert dashboard["totalOrders"] == 1
    assert dashboard["pendingOrders"] == 1
    assert dashboard["revenueGrowth"] == 100.0

    orders = admin_client.get("/api/admin/analytics/orders").json()
    assert orders["totalOrders"] == 2
    assert orders["ordersByStatus"] == {"pending": 2}
    assert orders["averageOrderValue"] == 375

    customers = admin_client.get("/api/admin/analytics/customers").json()
    assert customers["totalCustomers"] == 1
    assert customers["customers"][0]["customerPhone"] == "+919876543210"
    assert customers["customers"][0]["totalOrders"] == 2


def test_customer_export(admin_client, placed):
    resp = admin_client.get("/api/admin/customers/export", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.headers["content-disposition"].startswith("attachment; filename=customers-")
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0][0] == "Phone"
    assert rows[1][0] == "+919876543210"
    assert rows[1][3] == "1"
