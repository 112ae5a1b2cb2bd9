"""
Tests for reporting and admin endpoints.
"""

from datetime import datetime
from decimal import Decimal

from pos_ledger.models import Sale


class TestSummary:

    def test_summary(self, client, ids):
        client.post("/ledger/sales", json={
            "sale_id": 1,
            "total_amount": "100.00",
            "received_amount": "100.00",
            "sale_date": "2024-03-01T10:00:00",
            **ids,
        })
        client.post("/ledger/manual", json={
            "kind": "expense",
            "amount": "30.00",
            "transaction_date": "2024-03-02T10:00:00",
            **ids,
        })

        response = client.get("/reports/summary", params={
            "device_id": ids["device_id"],
            "date_from": "2024-03-01T00:00:00",
            "date_to": "2024-04-01T00:00:00",
        })
        data = response.json()

        assert response.status_code == 200
        assert data["total_revenue"] == "100.00"
        assert data["total_expenses"] == "30.00"
        assert data["net_profit"] == "70.00"
        assert data["cash_flow"] == "100.00"
        assert data["currency"] == "INR"

    def test_reversed_range_returns_400(self, client, ids):
        response = client.get("/reports/summary", params={
            "device_id": ids["device_id"],
            "date_from": "2024-04-01T00:00:00",
            "date_to": "2024-03-01T00:00:00",
        })
        assert response.status_code == 400

    def test_mixed_offset_and_plain_bounds(self, client, ids):
        response = client.get("/reports/summary", params={
            "device_id": ids["device_id"],
            "date_from": "2024-03-01T00:00:00Z",
            "date_to": "2024-04-01T00:00:00",
        })
        assert response.status_code == 200
        assert response.json()["date_from"].startswith("2024-03-01T00:00:00")

    def test_offset_entry_lands_in_utc_period(self, client, ids):
        response = client.post("/ledger/manual", json={
            "kind": "income",
            "amount": "10.00",
            "transaction_date": "2024-03-01T02:00:00+05:30",
            **ids,
        })
        assert response.json()["transaction_date"].startswith("2024-02-29T20:30:00")

        def other_income(date_from, date_to):
            return client.get("/reports/summary", params={
                "device_id": ids["device_id"],
                "date_from": date_from,
                "date_to": date_to,
            }).json()["total_other_income"]

        assert other_income("2024-03-01T00:00:00", "2024-04-01T00:00:00") == "0.00"
        assert other_income("2024-02-01T00:00:00", "2024-03-01T00:00:00") == "10.00"


class TestDashboard:

    def test_week_dashboard_shape(self, client, ids):
        response = client.get("/reports/dashboard", params={
            "user_id": ids["created_by"],
            "device_id": ids["device_id"],
            "period": "week",
        })
        data = response.json()

        assert response.status_code == 200
        assert len(data["cash_flow_data"]) == 7
        assert {s["label"] for s in data["quick_stats"]} == {
            "Total Revenue", "Total Expenses", "Net Profit", "Profit Margin",
        }
        assert [b["account"] for b in data["account_balances"]] == [
            "Cash", "Accounts Receivable", "Accounts Payable",
        ]

    def test_unknown_period_returns_422(self, client, ids):
        response = client.get("/reports/dashboard", params={
            "user_id": ids["created_by"],
            "device_id": ids["device_id"],
            "period": "decade",
        })
        assert response.status_code == 422

    def test_missing_user_returns_400(self, client, ids):
        response = client.get("/reports/dashboard", params={
            "user_id": 0,
            "device_id": ids["device_id"],
        })
        assert response.status_code == 400


class TestAdmin:

    def test_schema_already_initialized(self, client):
        response = client.post("/admin/schema")
        data = response.json()
        assert response.status_code == 200
        assert data["created_tables"] == []

    def test_migration_flow(self, client, db_session, ids):
        db_session.add(Sale(
            total_amount=Decimal("60"),
            received_amount=Decimal("60"),
            sale_date=datetime(2024, 2, 1),
            device_id=ids["device_id"],
            company_id=ids["company_id"],
            created_by=ids["created_by"],
        ))
        db_session.commit()
        url = f"/admin/migration/{ids['device_id']}"

        assert client.get(url).json()["needs_migration"] is True

        report = client.post(url).json()
        assert report["sales_migrated"] == 1
        assert report["skipped"] is False

        assert client.get(url).json()["needs_migration"] is False
        assert client.post(url).json()["skipped"] is True
