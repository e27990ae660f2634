"""
HTTP surface tests.

Verifies:
- Protected endpoints return 401 without a token
- Login issues a token, failures stay generic
- Role rules surface as 403 with the error envelope
- List and create envelopes carry the expected shape
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from armory.models import Asset, AuditLog, Purchase
from armory.security import create_access_token


PASSWORD = "demo123"


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/dashboard/metrics"),
            ("GET", "/purchases"),
            ("POST", "/purchases"),
            ("GET", "/transfers"),
            ("POST", "/transfers"),
            ("GET", "/assignments"),
            ("POST", "/assignments"),
            ("GET", "/expenditures"),
            ("POST", "/expenditures"),
            ("GET", "/assets"),
            ("GET", "/personnel"),
            ("GET", "/bases"),
            ("GET", "/equipment-types"),
            ("GET", "/audit-logs"),
            ("GET", "/auth/me"),
        ],
    )
    async def test_requires_auth(self, client, world, method, path):
        resp = await client.request(method, path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        body = resp.json()
        assert body["success"] is False
        assert body["error"]

    async def test_garbage_token(self, client, world):
        resp = await client.get("/purchases", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401

    async def test_expired_token(self, client, world):
        token = create_access_token(world.admin, timedelta(seconds=-5))
        resp = await client.get("/purchases", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert "expired" in resp.json()["error"].lower()

    async def test_unauthenticated_write_never_reads_the_body(self, client, world):
        resp = await client.post("/purchases", content=b"{not json")
        assert resp.status_code == 401

    async def test_health_is_public(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    async def test_ready_pings_the_store(self, client):
        resp = await client.get("/ready")
        assert resp.status_code == 200


# =============================================================================
# LOGIN
# =============================================================================


class TestLogin:
    async def test_login_success(self, client, database, world):
        resp = await client.post("/auth/login", json={"email": "commander@test.mil", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["token"]
        assert body["expires_in"] == 24 * 3600
        assert body["user"]["role"] == "commander"
        assert body["user"]["base_id"] == world.alpha.id

        me = await client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "commander@test.mil"

        async with database.session() as s:
            res = await s.execute(select(AuditLog).where(AuditLog.action == "LOGIN"))
            entry = res.scalar_one()
        assert entry.user_id == world.commander.id

    @pytest.mark.parametrize(
        "email,password",
        [("commander@test.mil", "wrong"), ("nobody@test.mil", PASSWORD)],
    )
    async def test_login_failure_is_generic(self, client, world, email, password):
        resp = await client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid email or password"

    async def test_login_requires_both_fields(self, client, world):
        resp = await client.post("/auth/login", json={"email": "commander@test.mil"})
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["password"]


# =============================================================================
# ROLE RULES (403)
# =============================================================================


class TestRoleRules:
    async def test_logistics_cannot_purchase_even_with_bad_body(self, client, logistics_headers):
        resp = await client.post("/purchases", json={"quantity": "lots"}, headers=logistics_headers)
        assert resp.status_code == 403
        assert resp.json() == {
            "success": False,
            "error": "Access denied. You do not have permission to perform this action.",
        }

    async def test_commander_cannot_read_audit_logs(self, client, commander_headers):
        resp = await client.get("/audit-logs", headers=commander_headers)
        assert resp.status_code == 403

    async def test_commander_cannot_purchase_for_foreign_base(self, client, world, commander_headers):
        resp = await client.post(
            "/purchases",
            json={
                "base_id": world.beta.id,
                "equipment_type_id": world.rifle.id,
                "quantity": 5,
                "purchase_date": "2024-01-15",
            },
            headers=commander_headers,
        )
        assert resp.status_code == 403

    async def test_commander_dashboard_ignores_base_filter(self, client, stocked, commander_headers):
        own = await client.get("/dashboard/metrics", headers=commander_headers)
        other = await client.get(f"/dashboard/metrics?base_id={stocked.beta.id}", headers=commander_headers)
        assert own.status_code == other.status_code == 200
        assert own.json() == other.json()
        assert own.json()["data"]["openingBalance"] == 665

    async def test_admin_dashboard_honors_base_filter(self, client, stocked, admin_headers):
        resp = await client.get(f"/dashboard/metrics?base_id={stocked.beta.id}", headers=admin_headers)
        data = resp.json()["data"]
        assert data["openingBalance"] == 200
        assert data["closingBalance"] == 200

    async def test_commander_sees_only_own_assets(self, client, stocked, commander_headers):
        resp = await client.get("/assets", headers=commander_headers)
        body = resp.json()
        assert body["count"] == 2
        assert {row["base_id"] for row in body["data"]} == {stocked.alpha.id}


# =============================================================================
# ENVELOPES AND ERRORS
# =============================================================================


class TestEnvelopes:
    async def test_create_and_list_purchase(self, client, database, world, admin_headers):
        resp = await client.post(
            "/purchases",
            json={
                "base_id": world.alpha.id,
                "equipment_type_id": world.rifle.id,
                "quantity": 50,
                "cost": 75000,
                "purchase_date": "2024-01-15",
                "supplier": "Defense Contractors Inc.",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Purchase record created successfully"
        assert body["data"]["quantity"] == 50

        listed = await client.get("/purchases", headers=admin_headers)
        payload = listed.json()
        assert payload["count"] == len(payload["data"]) == 1
        assert payload["data"][0]["base_name"] == "Base Alpha"
        assert payload["data"][0]["equipment_name"] == "M4 Rifle"

        async with database.session() as s:
            res = await s.execute(select(Asset))
            assert res.scalars().all() == []
            res = await s.execute(select(Purchase))
            assert len(res.scalars().all()) == 1

    async def test_same_base_transfer_is_400(self, client, world, logistics_headers):
        resp = await client.post(
            "/transfers",
            json={
                "from_base_id": world.alpha.id,
                "to_base_id": world.alpha.id,
                "equipment_type_id": world.rifle.id,
                "quantity": 5,
                "transfer_date": "2024-02-01",
            },
            headers=logistics_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Cannot transfer to the same base"

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    async def test_non_finite_cost_is_400(self, client, database, world, admin_headers, literal):
        body = (
            f'{{"base_id": {world.alpha.id}, "equipment_type_id": {world.rifle.id}, '
            f'"quantity": 5, "cost": {literal}, "purchase_date": "2024-01-15"}}'
        )
        resp = await client.post(
            "/purchases",
            content=body.encode(),
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["cost"]
        async with database.session() as s:
            res = await s.execute(select(Purchase))
            assert res.scalars().all() == []

    async def test_quantity_beyond_integer_range_is_400(self, client, world, admin_headers):
        resp = await client.post(
            "/expenditures",
            json={
                "base_id": world.alpha.id,
                "equipment_type_id": world.rifle.id,
                "quantity": 2**31,
                "expenditure_date": "2024-01-30",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["fields"] == ["quantity"]

    async def test_missing_fields_are_400(self, client, world, admin_headers):
        resp = await client.post("/expenditures", json={"base_id": world.alpha.id}, headers=admin_headers)
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert "quantity" in body["fields"]

    async def test_unknown_personnel_is_404(self, client, world, commander_headers):
        resp = await client.post(
            "/assignments",
            json={
                "base_id": world.alpha.id,
                "equipment_type_id": world.rifle.id,
                "personnel_id": 9999,
                "assignment_date": "2024-01-20",
            },
            headers=commander_headers,
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "Personnel 9999 not found"

    async def test_inverted_date_range_is_400(self, client, world, admin_headers):
        resp = await client.get("/purchases?date_from=2024-03-01&date_to=2024-01-01", headers=admin_headers)
        assert resp.status_code == 400

    async def test_audit_logs_for_admin(self, client, world, admin_headers):
        await client.post(
            "/transfers",
            json={
                "from_base_id": world.depot.id,
                "to_base_id": world.alpha.id,
                "equipment_type_id": world.rifle.id,
                "quantity": 5,
                "transfer_date": "2024-02-01",
            },
            headers=admin_headers,
        )
        resp = await client.get("/audit-logs?entity_type=TRANSFER", headers=admin_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["data"][0]["user_email"] == "admin@test.mil"

    async def test_unknown_route(self, client):
        resp = await client.get("/no-such-thing")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Route not found. Please check the API documentation."}
