from datetime import date

import pytest

from supplychain.app.core.config import Settings, get_settings
from supplychain.app.db.models.core_types import Role
from supplychain.app.schemas.user import UserCreate
from supplychain.services import alerts, users


def test_health(client):
    r = client.get("/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_create_and_page_suppliers(client):
    for i in range(3):
        r = client.post(
            "/v1/suppliers",
            json={"name": f"Fournisseur {i}", "contact": "contact@bois.fr", "rating": 4.5, "lead_time": 3},
        )
        assert r.status_code == 201
        assert r.json()["active_orders_count"] == 0

    body = client.get("/v1/suppliers", params={"page": 1, "size": 2}).json()
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert [s["name"] for s in body["items"]] == ["Fournisseur 2"]


def test_not_found_body(client):
    r = client.get("/v1/products/999")
    assert r.status_code == 404
    assert r.json() == {"detail": "Product not found with ID: 999", "code": "PRODUCT_NOT_FOUND"}


def test_validation_error(client):
    r = client.post("/v1/suppliers", json={"name": "X", "contact": "c", "lead_time": 0})
    assert r.status_code == 422


def test_customer_order_flow(client, make_customer, make_product):
    """
    GIVEN un produit à 50 en stock
    WHEN commande de 10, livraison créée, livraison marquée LIVREE
    THEN stock 40, coût 150.00, commande LIVREE
    """
    customer = make_customer()
    product = make_product(stock=50, cost="100.0")

    r = client.post(
        "/v1/customer-orders",
        json={"customer_id": customer.id, "product_id": product.id, "quantity": 10},
    )
    assert r.status_code == 201
    order = r.json()
    assert order["status"] == "EN_PREPARATION"
    assert order["product_name"] == "Chaise"
    assert client.get(f"/v1/products/{product.id}").json()["stock"] == 40

    r = client.post("/v1/deliveries", json={"order_id": order["id"], "vehicle": "Camion 12"})
    assert r.status_code == 201
    delivery = r.json()
    assert delivery["cost"] == 150.0
    assert client.get(f"/v1/customer-orders/{order['id']}").json()["status"] == "EN_ROUTE"

    r = client.put(f"/v1/deliveries/{delivery['id']}", json={"status": "LIVREE"})
    assert r.status_code == 200
    assert client.get(f"/v1/customer-orders/{order['id']}").json()["status"] == "LIVREE"

    r = client.delete(f"/v1/customer-orders/{order['id']}")
    assert r.status_code == 409
    assert r.json()["code"] == "CUSTOMER_ORDER_CANNOT_BE_CANCELLED"


def test_customer_order_insufficient_stock(client, make_customer, make_product):
    customer = make_customer()
    product = make_product(stock=5)

    r = client.post(
        "/v1/customer-orders",
        json={"customer_id": customer.id, "product_id": product.id, "quantity": 6},
    )
    assert r.status_code == 409
    assert r.json() == {
        "detail": "Insufficient stock for product 'Chaise'. Available: 5, Required: 6",
        "code": "INSUFFICIENT_STOCK",
    }


def test_delivery_calculate_cost(client, make_customer, make_product):
    order = client.post(
        "/v1/customer-orders",
        json={"customer_id": make_customer().id, "product_id": make_product(cost="12.34").id, "quantity": 1},
    ).json()
    delivery = client.post("/v1/deliveries", json={"order_id": order["id"], "cost": 999}).json()
    assert delivery["cost"] == 999.0

    r = client.post(f"/v1/deliveries/{delivery['id']}/calculate-cost")
    assert r.status_code == 200
    assert r.json() == {"delivery_id": delivery["id"], "cost": 51.23}


def test_production_order_reports_materials(client, make_product, make_material, make_bom):
    product = make_product()
    make_bom(product, make_material(name="Bois", stock=20), 4)

    r = client.post(
        "/v1/production-orders",
        json={"product_id": product.id, "quantity": 5, "start_date": date.today().isoformat()},
    )
    assert r.status_code == 201
    order_id = r.json()["id"]

    assert client.get(f"/v1/production-orders/{order_id}").json()["materials_available"] is True

    r = client.post(
        "/v1/production-orders",
        json={"product_id": product.id, "quantity": 6, "start_date": date.today().isoformat()},
    )
    assert r.status_code == 409
    assert r.json()["code"] == "INSUFFICIENT_MATERIALS"


def test_integrity_error_maps_to_conflict(client, make_customer, make_product):
    product = make_product()
    client.post(
        "/v1/customer-orders",
        json={"customer_id": make_customer().id, "product_id": product.id, "quantity": 1},
    )

    # commande client encore liée au produit
    r = client.delete(f"/v1/products/{product.id}")
    assert r.status_code == 409
    assert r.json()["code"] == "INTEGRITY_ERROR"


class RecordingSMTP:
    messages = []

    def __init__(self, host, port, timeout=None):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def starttls(self, context=None):
        pass

    def send_message(self, message):
        RecordingSMTP.messages.append(message)


def test_scheduler_run_endpoint(client, monkeypatch, make_material, db_session):
    RecordingSMTP.messages = []
    monkeypatch.setattr(alerts.smtplib, "SMTP", RecordingSMTP)
    make_material(name="Vis", stock=1, stock_min=10)
    db_session.commit()

    r = client.post("/v1/scheduler/low-stock/run")
    assert r.status_code == 200
    assert r.json() == {"materials_below_minimum": 1}
    assert len(RecordingSMTP.messages) == 1


# ---------- AUTH ----------
@pytest.fixture
def auth_client(client, db_session):
    from supplychain.app.main import app

    app.dependency_overrides[get_settings] = lambda: Settings(DATABASE_URL="sqlite://", AUTH_ENABLED=True)
    for email, role in (("admin@supplychainx.com", Role.admin), ("achats@supplychainx.com", Role.responsable_achats)):
        users.create_user(
            db_session,
            UserCreate(first_name="Test", last_name="User", email=email, password="password123", role=role),
        )
    db_session.commit()
    return client


def _headers(email, password="password123"):
    return {"X-User-Email": email, "X-User-Password": password}


def test_products_require_headers(auth_client):
    r = auth_client.get("/v1/products")
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"


def test_products_wrong_password(auth_client):
    r = auth_client.get("/v1/products", headers=_headers("admin@supplychainx.com", "nope"))
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_products_wrong_role(auth_client):
    r = auth_client.get("/v1/products", headers=_headers("achats@supplychainx.com"))
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"


def test_products_admin_allowed(auth_client):
    r = auth_client.post(
        "/v1/products",
        json={"name": "Table", "production_time": 3, "cost": "80.00", "stock": 5},
        headers=_headers("admin@supplychainx.com"),
    )
    assert r.status_code == 201
    assert auth_client.get("/v1/products", headers=_headers("admin@supplychainx.com")).json()["total"] == 1


def test_other_routes_stay_open(auth_client):
    assert auth_client.get("/v1/suppliers").status_code == 200


def test_second_delivery_is_conflict(client, make_customer, make_product):
    order = client.post(
        "/v1/customer-orders",
        json={"customer_id": make_customer().id, "product_id": make_product().id, "quantity": 1},
    ).json()
    assert client.post("/v1/deliveries", json={"order_id": order["id"]}).status_code == 201

    r = client.post("/v1/deliveries", json={"order_id": order["id"]})
    assert r.status_code == 409
    assert r.json()["code"] == "DELIVERY_ALREADY_EXISTS"
