"""
Tests for price, purchase and notification endpoints.
"""

from decimal import Decimal

from conftest import publish_prices


def create_member(client, bookid="BK001"):
    response = client.post("/accounts", json={
        "name": "Asha Rao", "bookid": bookid, "phone": "9876543210",
    })
    return response.json()["id"]


class TestPrices:

    def test_no_prices_yet_returns_204(self, client):
        assert client.get("/prices").status_code == 204

    def test_current_prices(self, client, db_session):
        publish_prices(db_session, gold="6000", silver="75")

        response = client.get("/prices")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["gold_price"]) == Decimal("6000")
        assert Decimal(data["silver_price"]) == Decimal("75")


class TestQuote:

    def test_quote(self, client, db_session):
        publish_prices(db_session, gold="6000")

        response = client.post("/purchases/quote", json={"cash_amount": 12000})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["grams"]) == Decimal("2.0000")
        assert Decimal(data["price_per_gram"]) == Decimal("6000")
        assert data["signature"]

    def test_quote_writes_nothing(self, client, db_session):
        account_id = create_member(client)
        publish_prices(db_session)

        client.post("/purchases/quote", json={"cash_amount": 12000})

        assert client.get(f"/accounts/{account_id}/transactions").json() == []

    def test_invalid_amount_returns_400(self, client, db_session):
        publish_prices(db_session)

        for amount in ["abc", "NaN", "0", -5]:
            response = client.post(
                "/purchases/quote", json={"cash_amount": amount}
            )
            assert response.status_code == 400

    def test_without_prices_returns_503(self, client):
        response = client.post("/purchases/quote", json={"cash_amount": 12000})

        assert response.status_code == 503


class TestCommitPurchase:

    def _quote(self, client, amount=12000):
        return client.post(
            "/purchases/quote", json={"cash_amount": amount}
        ).json()

    def test_commit_returns_201(self, client, db_session):
        account_id = create_member(client)
        publish_prices(db_session, gold="6000")

        response = client.post("/purchases", json={
            "account_id": account_id, "quote": self._quote(client),
        })

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == account_id
        assert data["bookid"] == "BK001"
        assert Decimal(data["total_amount"]) == Decimal("12000")

        account = client.get(f"/accounts/{account_id}").json()
        assert Decimal(account["total_grams"]) == Decimal("2")
        assert Decimal(account["total_amount_spent"]) == Decimal("12000")

    def test_commit_refreshes_signed_in_session(
        self, client, db_session, session_manager
    ):
        account_id = create_member(client)
        publish_prices(db_session, gold="6000")
        client.post("/session/login", json={"bookid": "BK001"})

        client.post("/purchases", json={
            "account_id": account_id, "quote": self._quote(client),
        })

        assert session_manager.current.total_grams == Decimal("2")
        session = client.get("/session").json()
        assert Decimal(session["total_grams"]) == Decimal("2")

    def test_commit_for_missing_account_returns_404(self, client, db_session):
        publish_prices(db_session)

        response = client.post("/purchases", json={
            "account_id": 999, "quote": self._quote(client),
        })

        assert response.status_code == 404

    def test_forged_quote_returns_400(self, client, db_session):
        account_id = create_member(client)
        publish_prices(db_session, gold="6000")
        quote = self._quote(client)
        quote["grams"] = "20.0000"

        response = client.post("/purchases", json={
            "account_id": account_id, "quote": quote,
        })

        assert response.status_code == 400
        assert client.get(f"/accounts/{account_id}/transactions").json() == []

    def test_made_up_price_returns_400(self, client, db_session):
        account_id = create_member(client)
        publish_prices(db_session, gold="6000")
        quote = self._quote(client)
        quote.update(grams="1.0000", cash_amount="1", price_per_gram="1")

        response = client.post("/purchases", json={
            "account_id": account_id, "quote": quote,
        })

        assert response.status_code == 400
        account = client.get(f"/accounts/{account_id}").json()
        assert Decimal(account["total_grams"]) == Decimal("0")

    def test_unsigned_quote_returns_400(self, client, db_session):
        account_id = create_member(client)
        publish_prices(db_session, gold="6000")

        response = client.post("/purchases", json={
            "account_id": account_id,
            "quote": {
                "grams": "1.0000", "cash_amount": "1",
                "price_per_gram": "1", "snapshot_time": "2024-01-01T10:00:00",
            },
        })

        assert response.status_code == 400
        assert client.get(f"/accounts/{account_id}/transactions").json() == []


class TestNotifications:

    def test_price_update_refetches_prices(self, client, db_session):
        publish_prices(db_session, gold="6100")

        response = client.post("/notifications", json={
            "title": "Gold Price Update", "body": "New prices are live",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["triggered"] is True
        assert Decimal(data["prices"]["gold_price"]) == Decimal("6100")

    def test_other_notification_ignored(self, client):
        response = client.post("/notifications", json={
            "title": "Reminder", "body": "Pay this month",
        })

        assert response.json() == {"triggered": False, "prices": None}
