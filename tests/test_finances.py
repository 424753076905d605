"""
Finance Tests
=============

Expenses, incomes, the financial summary and owner scoping.
"""

import uuid

import pytest
from httpx import AsyncClient

from tests.conftest import create_client_record, create_project_record, register


async def _expense(client: AsyncClient, amount, date: str = "2026-03-10", **fields):
    return await client.post(
        "/api/v1/finances/expenses",
        json={"amount": amount, "date": date, "currencyId": 1, **fields},
    )


async def _income(client: AsyncClient, amount, date: str = "2026-03-10", **fields):
    return await client.post(
        "/api/v1/finances/incomes",
        json={"amount": amount, "date": date, "currencyId": 1, **fields},
    )


class TestRecordEntries:
    @pytest.mark.asyncio
    async def test_record_expense(self, auth_client: AsyncClient):
        response = await _expense(auth_client, "120.50", description="Hosting", isDeductible=True)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["amount"] == 120.5
        assert data["date"] == "2026-03-10"
        assert data["isDeductible"] is True
        assert data["projectId"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -10])
    async def test_amount_must_be_positive(self, auth_client: AsyncClient, amount):
        response = await _income(auth_client, amount)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Amount must be greater than 0"

    @pytest.mark.asyncio
    async def test_date_and_currency_required(self, auth_client: AsyncClient):
        no_date = await auth_client.post(
            "/api/v1/finances/incomes",
            json={"amount": 10, "currencyId": 1},
        )
        no_currency = await auth_client.post(
            "/api/v1/finances/incomes",
            json={"amount": 10, "date": "2026-03-10"},
        )

        assert no_date.json()["error"]["message"] == "Date is required"
        assert no_currency.json()["error"]["message"] == "Currency is required"

    @pytest.mark.asyncio
    async def test_unknown_currency(self, auth_client: AsyncClient):
        response = await _expense(auth_client, 10, currencyId=99)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_foreign_project_link_rejected(self, auth_client: AsyncClient):
        acme = await create_client_record(auth_client)
        project = await create_project_record(auth_client, acme["id"])
        auth_client.cookies.clear()
        await register(auth_client, email="bo@example.com", display_name="Bo")

        response = await _expense(auth_client, 10, projectId=project["id"])

        assert response.status_code == 404


class TestListAndDelete:
    @pytest.mark.asyncio
    async def test_list_newest_first_with_filters(self, auth_client: AsyncClient):
        await _expense(auth_client, 10, date="2026-01-05")
        await _expense(auth_client, 20, date="2026-03-05", isDeductible=True)
        await _expense(auth_client, 30, date="2026-02-05")

        everything = await auth_client.get("/api/v1/finances/expenses")
        deductible = await auth_client.get("/api/v1/finances/expenses", params={"deductible": "true"})
        february = await auth_client.get(
            "/api/v1/finances/expenses",
            params={"from": "2026-02-01", "to": "2026-02-28"},
        )

        assert [e["amount"] for e in everything.json()["data"]] == [20.0, 30.0, 10.0]
        assert [e["amount"] for e in deductible.json()["data"]] == [20.0]
        assert [e["amount"] for e in february.json()["data"]] == [30.0]

    @pytest.mark.asyncio
    async def test_delete_income(self, auth_client: AsyncClient):
        income = (await _income(auth_client, 500)).json()["data"]

        response = await auth_client.delete(f"/api/v1/finances/incomes/{income['id']}")

        assert response.status_code == 200
        assert (await auth_client.get("/api/v1/finances/incomes")).json()["data"] == []

    @pytest.mark.asyncio
    async def test_delete_unknown_expense(self, auth_client: AsyncClient):
        response = await auth_client.delete(f"/api/v1/finances/expenses/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_entries_are_private(self, auth_client: AsyncClient):
        expense = (await _expense(auth_client, 10)).json()["data"]
        auth_client.cookies.clear()
        await register(auth_client, email="bo@example.com", display_name="Bo")

        assert (await auth_client.get("/api/v1/finances/expenses")).json()["data"] == []
        response = await auth_client.delete(f"/api/v1/finances/expenses/{expense['id']}")
        assert response.status_code == 404


class TestSummary:
    @pytest.mark.asyncio
    async def test_all_time_summary(self, auth_client: AsyncClient):
        await _income(auth_client, 1000)
        await _income(auth_client, "250.25", date="2025-12-31")
        await _expense(auth_client, 300, isDeductible=True)
        await _expense(auth_client, 100)

        response = await auth_client.get("/api/v1/finances/summary")

        assert response.json()["data"] == {
            "totalIncome": 1250.25,
            "totalExpense": 400.0,
            "balance": 850.25,
            "deductibleExpenses": 300.0,
        }

    @pytest.mark.asyncio
    async def test_month_summary(self, auth_client: AsyncClient):
        await _income(auth_client, 1000, date="2026-03-01")
        await _income(auth_client, 500, date="2026-03-31")
        await _income(auth_client, 700, date="2026-04-01")
        await _expense(auth_client, 200, date="2026-02-28")

        response = await auth_client.get("/api/v1/finances/summary", params={"year": 2026, "month": 3})

        data = response.json()["data"]
        assert data["totalIncome"] == 1500.0
        assert data["totalExpense"] == 0.0
        assert data["balance"] == 1500.0

    @pytest.mark.asyncio
    async def test_empty_summary(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/v1/finances/summary")

        assert response.json()["data"]["balance"] == 0.0

    @pytest.mark.asyncio
    async def test_month_requires_year(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/v1/finances/summary", params={"month": 3})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_month_out_of_range(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/v1/finances/summary", params={"year": 2026, "month": 13})

        assert response.status_code == 400


class TestFormOptions:
    @pytest.mark.asyncio
    async def test_currencies(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/v1/finances/currencies")

        assert [c["code"] for c in response.json()["data"]] == ["EUR", "USD"]

    @pytest.mark.asyncio
    async def test_projects_for_select_skip_archived(self, auth_client: AsyncClient):
        acme = await create_client_record(auth_client)
        await create_project_record(auth_client, acme["id"], "Live")
        shelved = await create_project_record(auth_client, acme["id"], "Shelved")
        await auth_client.post(f"/api/v1/projects/{shelved['id']}/archive")

        response = await auth_client.get("/api/v1/finances/projects")

        assert [p["name"] for p in response.json()["data"]] == ["Live"]
