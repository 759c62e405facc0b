"""
Интеграционные тесты JSON API: вход, справочники, дашборд, журналы и коды ошибок.
"""
import asyncio
import io

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from asset_tracker.config import SESSION_COOKIE_NAME


def _purchase_payload(**overrides) -> dict:
    payload = {
        "asset_id": "asset-eq-1",
        "quantity": 100,
        "unit_cost": "10.00",
        "supplier_info": "Colt Defense",
        "receiving_base_id": "base-1",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_login_sets_session_cookie(client_anon: AsyncClient):
    response = await client_anon.post("/login", json={"username": "testlogistics", "password": "testpass"})
    assert response.status_code == 200
    assert response.json()["role"] == "logistics_officer"
    assert response.json()["role_label"] == "Logistics Officer"
    assert SESSION_COOKIE_NAME in response.cookies

    me = await client_anon.get("/me")
    assert me.status_code == 200
    assert me.json()["username"] == "testlogistics"


@pytest.mark.asyncio
async def test_login_wrong_password(client_anon: AsyncClient):
    response = await client_anon.post("/login", json={"username": "testadmin", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_anonymous_requests_rejected(client_anon: AsyncClient):
    for url in ("/me", "/api/dashboard", "/api/purchases", "/api/reference/bases"):
        response = await client_anon.get(url)
        assert response.status_code == 401, url
        assert response.json() == {"detail": "Authentication required", "code": "unauthorized"}


@pytest.mark.asyncio
async def test_reference_bases_scoped_to_user(client: AsyncClient, commander_client: AsyncClient):
    admin_bases = await client.get("/api/reference/bases")
    assert {b["id"] for b in admin_bases.json()} == {"base-1", "base-2", "base-3"}
    commander_bases = await commander_client.get("/api/reference/bases")
    assert [b["id"] for b in commander_bases.json()] == ["base-1"]


@pytest.mark.asyncio
async def test_reference_assets_by_kind(client: AsyncClient):
    response = await client.get("/api/reference/assets", params={"kind": "expendable"})
    assert response.status_code == 200
    assets = response.json()
    assert [a["id"] for a in assets] == ["asset-eq-3"]
    assert assets[0]["equipment_type"]["category"] == "consumable"
    assert assets[0]["current_balance"] == 8500


@pytest.mark.asyncio
async def test_create_purchase_and_dashboard(client: AsyncClient):
    created = await client.post("/api/purchases", json=_purchase_payload())
    assert created.status_code == 201
    body = created.json()
    assert body["total_cost"] in ("1000.00", "1000", 1000)
    assert body["receiving_base"]["name"] == "Fort Liberty"

    transfer = await client.post("/api/transfers", json={
        "asset_id": "asset-eq-1", "quantity": 30, "source_base_id": "base-1",
        "destination_base_id": "base-2", "reason": "Rotation",
    })
    assert transfer.status_code == 201
    assert transfer.json()["status"] == "initiated"

    dashboard = await client.get("/api/dashboard")
    assert dashboard.status_code == 200
    metrics = dashboard.json()
    assert metrics["net_movement"] == 100
    assert metrics["closing_balance"] == metrics["opening_balance"] + 100

    breakdown = await client.get("/api/dashboard/net-movement", params={"base_id": "base-2"})
    assert breakdown.status_code == 200
    data = breakdown.json()
    assert data["total_purchases"] == 0
    assert data["total_transfers_in"] == 30
    assert data["net_movement"] == 30
    assert len(data["transfers_in"]) == 1

    listing = await client.get("/api/purchases")
    assert listing.json()["summary"]["count"] == 1


@pytest.mark.asyncio
async def test_create_purchase_validation_error(client: AsyncClient):
    response = await client.post("/api/purchases", json=_purchase_payload(quantity=0))
    assert response.status_code == 422
    assert response.json() == {
        "detail": "Quantity and unit cost must be positive numbers",
        "code": "validation_error",
    }
    listing = await client.get("/api/purchases")
    assert listing.json()["items"] == []


@pytest.mark.asyncio
async def test_commander_cannot_record(commander_client: AsyncClient):
    response = await commander_client.post("/api/purchases", json=_purchase_payload())
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_dashboard_foreign_base_forbidden(commander_client: AsyncClient):
    response = await commander_client.get("/api/dashboard", params={"base_id": "base-2"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_inverted_range(client: AsyncClient):
    response = await client.get("/api/dashboard", params={"start": "2024-02-01", "end": "2024-01-01"})
    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


@pytest.mark.asyncio
async def test_expenditure_over_balance(client: AsyncClient):
    payload = {"asset_id": "asset-eq-3", "quantity_expended": 9000, "base_id": "base-1", "reason": "Live fire"}
    rejected = await client.post("/api/expenditures", json=payload)
    assert rejected.status_code == 422
    assert "Current balance: 8500" in rejected.json()["detail"]

    accepted = await client.post("/api/expenditures", json={**payload, "quantity_expended": 500})
    assert accepted.status_code == 201
    assets = (await client.get("/api/reference/assets", params={"kind": "expendable"})).json()
    assert assets[0]["current_balance"] == 8000


@pytest.mark.asyncio
async def test_assignment_and_listing(client: AsyncClient):
    created = await client.post("/api/assignments", json={
        "asset_id": "asset-eq-2", "assigned_to_personnel_id": "person-1",
        "base_of_assignment_id": "base-1", "purpose": "Convoy escort",
        "expected_return_date": "2099-01-01",
    })
    assert created.status_code == 201
    listing = await client.get("/api/assignments", params={"active": "active"})
    assert listing.status_code == 200
    assert listing.json()["summary"] == {"active": 1, "returned": 0, "overdue": 0}

    dashboard = await client.get("/api/dashboard")
    assert dashboard.json()["assigned_assets"] == 1


@pytest.mark.asyncio
async def test_dashboard_export_xlsx(client: AsyncClient):
    await client.post("/api/purchases", json=_purchase_payload())
    response = await client.get("/api/dashboard/export.xlsx")
    assert response.status_code == 200
    assert "spreadsheetml" in response.headers["content-type"]
    wb = load_workbook(io.BytesIO(response.content))
    assert "Summary" in wb.sheetnames
    assert wb["Metadata"]["B2"].value == "testadmin"


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    response = await client.post("/logout")
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_concurrent_rejected_request_keeps_accepted_append(client: AsyncClient, commander_client: AsyncClient):
    """Отклонённый параллельный запрос не откатывает чужую запись."""
    accepted, rejected = await asyncio.gather(
        client.post("/api/purchases", json=_purchase_payload()),
        commander_client.post("/api/purchases", json=_purchase_payload()),
    )
    assert accepted.status_code == 201
    assert rejected.status_code == 403
    listing = await client.get("/api/purchases")
    assert listing.json()["summary"]["count"] == 1
    assert listing.json()["items"][0]["id"] == accepted.json()["id"]
