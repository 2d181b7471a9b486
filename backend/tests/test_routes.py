"""
HTTP API tests.

Verifies:
- Unauthenticated requests return 401
- Role gates: Sales, Inventory and Admin see only their views (403 otherwise)
- Session, team, stock, customer, order and collections flows end to end
"""

import pytest

from conftest import login, login_as_admin
from velvessa.models import KeyValueEntry


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a session."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("POST", "/api/auth/logout"),
            ("GET", "/api/admin/users"),
            ("GET", "/api/admin/audit-logs"),
            ("GET", "/api/stock/"),
            ("GET", "/api/customers/"),
            ("GET", "/api/orders/"),
            ("POST", "/api/orders/"),
            ("GET", "/api/payments/dues"),
            ("POST", "/api/payments/remind-all"),
            ("GET", "/api/reports/dashboard"),
            ("GET", "/api/reports/summary"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"


# =============================================================================
# ROLE GATES (403)
# =============================================================================


class TestRoleGates:

    @pytest.mark.parametrize(
        "member,path,expected",
        [
            ("inventory", "/api/stock/", 200),
            ("inventory", "/api/orders/", 403),
            ("inventory", "/api/customers/", 403),
            ("inventory", "/api/payments/dues", 403),
            ("inventory", "/api/reports/dashboard", 200),
            ("inventory", "/api/reports/summary", 403),
            ("inventory", "/api/admin/users", 403),
            ("sales", "/api/stock/", 403),
            ("sales", "/api/orders/", 200),
            ("sales", "/api/customers/", 200),
            ("sales", "/api/payments/dues", 200),
            ("sales", "/api/reports/dashboard", 200),
            ("sales", "/api/admin/audit-logs", 403),
        ],
    )
    def test_role_views(self, client, team, member, path, expected):
        assert login(client, team[member].email, "secret").status_code == 200

        resp = client.get(path)
        assert resp.status_code == expected, f"{member} {path} returned {resp.status_code}"

    def test_denial_names_required_roles(self, client, team):
        login(client, team["sales"].email, "secret")

        resp = client.get("/api/admin/users")
        assert resp.json["required_roles"] == ["Admin"]

    @pytest.mark.parametrize("path", [
        "/api/stock/", "/api/orders/", "/api/customers/", "/api/reports/summary", "/api/admin/sms-logs",
    ])
    def test_admin_sees_everything(self, client, db_session, path):
        login_as_admin(client)
        assert client.get(path).status_code == 200


# =============================================================================
# SESSION
# =============================================================================


class TestSessionApi:

    def test_login_and_me(self, client, db_session):
        resp = login_as_admin(client)
        assert resp.json["user"]["id"] == "admin-001"
        assert "password" not in resp.json["user"]

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json["user"]["role"] == "Admin"

    def test_wrong_password(self, client, db_session):
        resp = login(client, "admin", "nope")
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid credentials"

    def test_pending_user_denied(self, client, team):
        resp = login(client, team["pending"].email, "secret")
        assert resp.status_code == 403
        assert resp.json["status"] == "Pending"

    def test_register_then_approve(self, client, db_session):
        resp = client.post("/api/auth/register", json={
            "name": "Nina New", "email": "nina@velvessa.test", "password": "pw", "role": "Sales",
        })
        assert resp.status_code == 201
        assert resp.json["user"]["status"] == "Pending"
        user_id = resp.json["user"]["id"]

        assert client.post("/api/auth/register", json={"email": "nina@velvessa.test"}).status_code == 409
        assert login(client, "nina@velvessa.test", "pw").status_code == 403

        login_as_admin(client)
        resp = client.post(f"/api/admin/users/{user_id}/status", json={"status": "Approved"})
        assert resp.status_code == 200

        assert login(client, "nina@velvessa.test", "pw").status_code == 200

    def test_status_validation(self, client, db_session):
        login_as_admin(client)
        assert client.post("/api/admin/users/admin-001/status", json={"status": "Active"}).status_code == 400
        assert client.post("/api/admin/users/u-404/status", json={"status": "Approved"}).status_code == 404

    def test_profile_update_and_own_logs(self, client, db_session):
        login_as_admin(client)

        resp = client.patch("/api/auth/me", json={"name": "Head Stylist"})
        assert resp.status_code == 200
        assert client.get("/api/auth/me").json["user"]["name"] == "Head Stylist"

        assert client.patch("/api/auth/me", json={"role": "Sales"}).status_code == 400

        actions = [log["action"] for log in client.get("/api/auth/me/logs").json["logs"]]
        assert actions == ["Update Profile", "Login"]

    def test_audit_log_limit(self, client, db_session):
        login_as_admin(client)

        assert len(client.get("/api/admin/audit-logs?limit=-1").json["logs"]) == 0
        resp = client.get("/api/admin/audit-logs?limit=1")
        assert [log["action"] for log in resp.json["logs"]] == ["Login"]
        assert len(client.get("/api/admin/sms-logs?limit=-1").json["logs"]) == 0

    def test_login_survives_malformed_snapshot(self, client, db_session):
        db_session.add(KeyValueEntry(key="v_stock", value="{not json"))
        db_session.commit()

        assert login_as_admin(client).status_code == 200
        assert client.get("/api/auth/me").status_code == 200

    def test_logout(self, client, db_session):
        login_as_admin(client)
        assert client.post("/api/auth/logout").status_code == 200
        assert client.get("/api/auth/me").status_code == 401


# =============================================================================
# STOCK & CUSTOMERS
# =============================================================================


class TestStockApi:

    def test_crud(self, client, team):
        login(client, team["inventory"].email, "secret")

        resp = client.post("/api/stock/", json={
            "sku": "VC-ACC-007",
            "name": "Silk Scarf",
            "category": "Accessories",
            "quantity": 4,
            "purchase_price_cents": 1200,
            "selling_price_cents": 3000,
        })
        assert resp.status_code == 201
        item_id = resp.json["item"]["id"]

        resp = client.put(f"/api/stock/{item_id}", json={"quantity": 1})
        assert resp.json["item"]["quantity"] == 1

        low = client.get("/api/stock/?low_stock=true").json["items"]
        assert {i["id"] for i in low} == {"s2", item_id}

        assert client.get("/api/stock/?q=scarf").json["count"] == 1
        assert client.delete(f"/api/stock/{item_id}").status_code == 200
        assert client.get(f"/api/stock/{item_id}").status_code == 404

    def test_invalid_payload(self, client, db_session):
        login_as_admin(client)
        assert client.post("/api/stock/", json={"name": "No SKU"}).status_code == 400
        assert client.put("/api/stock/s1", json={"selling_price_cents": -5}).status_code == 400


class TestCustomersApi:

    def test_directory_and_history(self, client, team):
        login(client, team["sales"].email, "secret")

        resp = client.post("/api/customers/", json={"name": "Lena Park", "phone": "555-0303"})
        assert resp.status_code == 201

        suggestions = client.get("/api/customers/?q=len&suggest=true").json["customers"]
        assert [c["name"] for c in suggestions] == ["Lena Park"]
        assert client.get("/api/customers/?suggest=true").json["count"] == 0

        history = client.get("/api/customers/c1/history").json
        assert history["total_due_cents"] == 29300
        assert client.get("/api/customers/c404/history").status_code == 404


# =============================================================================
# ORDERS & COLLECTIONS
# =============================================================================


class TestOrdersApi:

    def test_cart_helpers(self, client, team):
        login(client, team["sales"].email, "secret")

        resp = client.post("/api/orders/cart", json={"items": [], "stock_item_id": "s2", "quantity": 2})
        assert resp.status_code == 200
        assert resp.json["items"] == [{"stock_item_id": "s2", "quantity": 2, "unit_price_cents": 12000}]
        assert resp.json["tax_cents"] == 1920

        over = client.post("/api/orders/cart", json={
            "items": resp.json["items"], "stock_item_id": "s2", "quantity": 2,
        })
        assert over.status_code == 400

        resp = client.post("/api/orders/cart/remove", json={
            "items": resp.json["items"], "stock_item_id": "s2",
        })
        assert resp.json["items"][0]["quantity"] == 1

    def test_order_lifecycle(self, client, team):
        login(client, team["sales"].email, "secret")

        resp = client.post("/api/orders/", json={
            "items": [{"stock_item_id": "s1", "quantity": 1}],
            "customer_id": "c1",
            "delivery_charge_cents": 1500,
            "advance_paid_cents": 10000,
        })
        assert resp.status_code == 201
        order = resp.json["order"]
        assert order["id"] == "ORD-1002"
        assert order["total_amount_cents"] == 39300
        assert order["balance_due_cents"] == 29300
        assert order["payment_status"] == "Partial"
        assert order["customer_name"] == "Sarah Jenkins"

        resp = client.post("/api/orders/ORD-1002/delivery-status", json={"status": "Shipped"})
        assert resp.json["order"]["delivery_status"] == "Shipped"

        resp = client.post("/api/orders/ORD-1002/notify")
        assert resp.json["sent"] is True
        assert "Shipped" in resp.json["sms"]["message"]

        assert client.get("/api/orders/?payment_status=Partial").json["count"] == 2

        login_as_admin(client)
        stock = client.get("/api/stock/s1").json["item"]
        assert stock["quantity"] == 11
        assert client.get("/api/admin/sms-logs").json["count"] == 1

    def test_new_customer_inline(self, client, db_session):
        login_as_admin(client)

        resp = client.post("/api/orders/", json={
            "items": [{"stock_item_id": "s2", "quantity": 1}],
            "customer": {"name": "Lena Park", "phone": "555-0303"},
        })
        assert resp.status_code == 201
        assert resp.json["order"]["customer_name"] == "Lena Park"
        assert resp.json["order"]["payment_status"] == "Due"

    def test_rejected_orders(self, client, db_session):
        login_as_admin(client)

        empty = client.post("/api/orders/", json={"items": [], "customer_id": "c1"})
        assert empty.status_code == 400

        unknown = client.post("/api/orders/", json={
            "items": [{"stock_item_id": "s404", "quantity": 1}], "customer_id": "c1",
        })
        assert unknown.status_code == 400

        assert client.get("/api/orders/ORD-9999").status_code == 404
        assert client.post("/api/orders/ord-1001/delivery-status", json={"status": "Lost"}).status_code == 400


class TestPaymentsApi:

    def test_dues_and_reminders(self, client, team):
        login(client, team["sales"].email, "secret")

        dues = client.get("/api/payments/dues").json
        assert dues["total_outstanding_cents"] == 29300
        assert [o["id"] for o in dues["due_orders"]] == ["ord-1001"]

        resp = client.post("/api/payments/ord-1001/remind")
        assert resp.json["sent"] is True
        assert "outstanding balance of ৳293" in resp.json["sms"]["message"]

        assert client.post("/api/payments/remind-all").json["sent"] == 1
        assert client.post("/api/payments/ORD-9999/remind").status_code == 404


# =============================================================================
# REPORTS & HEALTH
# =============================================================================


class TestReportsApi:

    def test_dashboard_and_summary(self, client, db_session):
        login_as_admin(client)

        dashboard = client.get("/api/reports/dashboard").json
        assert dashboard["total_revenue_cents"] == 39300
        assert dashboard["low_stock_count"] == 1

        summary = client.get("/api/reports/summary").json
        assert summary["inventory_value_cents"] == 193500


class TestHealth:

    def test_empty_store_is_degraded(self, client, db_session):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "degraded"
        assert "v_stock" in resp.json["checks"]["snapshot_store"]["details"]["missing_keys"]

    def test_initialized_store_is_healthy(self, client, state):
        state.persist_all()
        resp = client.get("/health")
        assert resp.json["status"] == "healthy"
