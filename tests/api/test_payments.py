"""
Tests for payment and subledger endpoints.
"""


def open_receivable(client, ids, sale_id=1, original="200.00"):
    return client.put("/receivables", json={
        "sale_id": sale_id,
        "original_amount": original,
        "device_id": ids["device_id"],
        "company_id": ids["company_id"],
    })


class TestPayments:

    def test_payments_reconcile_receivable(self, client, ids):
        open_receivable(client, ids)

        for amount in ("50.00", "30.00"):
            response = client.post("/payments", json={
                "reference_type": "sale",
                "reference_id": 1,
                "amount": amount,
                **ids,
            })
            assert response.status_code == 201

        receivable = response.json()["receivable"]
        assert receivable["paid_amount"] == "80.00"
        assert receivable["outstanding_amount"] == "120.00"

    def test_payment_for_cash_sale(self, client, ids):
        response = client.post("/payments", json={
            "reference_type": "sale",
            "reference_id": 77,
            "amount": "10.00",
            "payment_method": "UPI",
            **ids,
        })
        data = response.json()
        assert response.status_code == 201
        assert data["receivable"] is None
        assert data["payment"]["payment_method"] == "UPI"
        assert data["ledger_entry"]["debit_amount"] == "10.00"

    def test_zero_payment_returns_422(self, client, ids):
        response = client.post("/payments", json={
            "reference_type": "purchase",
            "reference_id": 1,
            "amount": "0",
            **ids,
        })
        assert response.status_code == 422


class TestSubledgers:

    def test_upsert_receivable(self, client, ids):
        response = open_receivable(client, ids)
        data = response.json()
        assert response.status_code == 200
        assert data["outstanding_amount"] == "200.00"

    def test_list_open_receivables(self, client, ids):
        open_receivable(client, ids, sale_id=1)
        open_receivable(client, ids, sale_id=2)

        response = client.get("/receivables", params={"device_id": ids["device_id"]})

        assert {r["sale_id"] for r in response.json()} == {1, 2}

    def test_upsert_and_list_payables(self, client, ids):
        response = client.put("/payables", json={
            "supplier_name": "Acme Traders",
            "purchase_id": 4,
            "original_amount": "500.00",
            "paid_amount": "125.00",
            "device_id": ids["device_id"],
            "company_id": ids["company_id"],
        })
        assert response.json()["outstanding_amount"] == "375.00"

        listed = client.get("/payables", params={"device_id": ids["device_id"]})
        assert len(listed.json()) == 1
