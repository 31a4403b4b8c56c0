"""Tests for the holdings API."""

from datetime import timedelta
from decimal import Decimal

from conftest import OTHER_USER_ID, make_token
from portfolio_tracker.models import Holding


def new_holding(**overrides):
    payload = {
        "symbol": " tcs ",
        "name": "Tata Consultancy Services",
        "asset_type": "stock",
        "quantity": "10",
        "buy_price": "3000",
        "sector": "IT",
    }
    payload.update(overrides)
    return payload


class TestHoldingsAuth:
    """Authentication on holdings endpoints."""

    def test_requires_token(self, client):
        response = client.get("/api/holdings")
        assert response.status_code in (401, 403)

    def test_rejects_bad_token(self, client):
        response = client.get("/api/holdings", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_rejects_expired_token(self, client):
        token = make_token("someone", expires_in=timedelta(minutes=-5))
        response = client.get("/api/holdings", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestCreateHolding:
    """POST /api/holdings."""

    def test_create_normalizes_and_defaults_current_price(self, client, auth_headers):
        response = client.post("/api/holdings", json=new_holding(), headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["symbol"] == "TCS"
        assert Decimal(data["current_price"]) == Decimal("3000")
        assert Decimal(data["value"]) == Decimal("30000")
        assert Decimal(data["pnl"]) == 0

    def test_blank_sector_is_stored_as_null(self, client, auth_headers):
        response = client.post("/api/holdings", json=new_holding(sector="  "), headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["sector"] is None

    def test_rejects_non_positive_buy_price(self, client, auth_headers):
        response = client.post("/api/holdings", json=new_holding(buy_price="0"), headers=auth_headers)
        assert response.status_code == 422

    def test_rejects_negative_quantity(self, client, auth_headers):
        response = client.post("/api/holdings", json=new_holding(quantity="-1"), headers=auth_headers)
        assert response.status_code == 422

    def test_rejects_unknown_asset_type(self, client, auth_headers):
        response = client.post("/api/holdings", json=new_holding(asset_type="crypto"), headers=auth_headers)
        assert response.status_code == 422


class TestReadHoldings:
    """GET /api/holdings and /api/holdings/{id}."""

    def test_list_newest_first_with_valuation(self, client, auth_headers, make_holding):
        make_holding("INFY", buy_price="1500")
        make_holding("TCS", buy_price="3000", current_price="3300")

        response = client.get("/api/holdings", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [h["symbol"] for h in data] == ["TCS", "INFY"]
        assert Decimal(data[0]["value"]) == Decimal("33000")
        assert Decimal(data[0]["invested"]) == Decimal("30000")
        assert Decimal(data[0]["pnl"]) == Decimal("3000")
        assert Decimal(data[0]["pnl_percent"]) == Decimal("10")

    def test_list_only_own_holdings(self, client, auth_headers, make_holding):
        make_holding("TCS")
        make_holding("INFY", user_id=OTHER_USER_ID)

        data = client.get("/api/holdings", headers=auth_headers).json()

        assert [h["symbol"] for h in data] == ["TCS"]

    def test_get_other_users_holding_is_404(self, client, auth_headers, make_holding):
        theirs = make_holding("INFY", user_id=OTHER_USER_ID)

        response = client.get(f"/api/holdings/{theirs.id}", headers=auth_headers)

        assert response.status_code == 404


class TestUpdateAndDeleteHolding:
    """PATCH and DELETE /api/holdings/{id}."""

    def test_partial_update(self, client, auth_headers, make_holding):
        holding = make_holding("TCS", quantity="10")

        response = client.patch(
            f"/api/holdings/{holding.id}",
            json={"quantity": "15", "sector": "Technology"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["quantity"]) == Decimal("15")
        assert data["sector"] == "Technology"
        assert data["symbol"] == "TCS"

    def test_null_required_field_is_rejected(self, client, auth_headers, make_holding):
        holding = make_holding("TCS")

        response = client.patch(
            f"/api/holdings/{holding.id}", json={"buy_price": None}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_update_other_users_holding_is_404(self, client, auth_headers, make_holding):
        theirs = make_holding("INFY", user_id=OTHER_USER_ID)

        response = client.patch(
            f"/api/holdings/{theirs.id}", json={"quantity": "1"}, headers=auth_headers
        )

        assert response.status_code == 404

    def test_delete(self, client, auth_headers, make_holding, db):
        holding = make_holding("TCS")
        holding_id = holding.id

        response = client.delete(f"/api/holdings/{holding_id}", headers=auth_headers)

        assert response.status_code == 200
        assert db.get(Holding, holding_id) is None

    def test_delete_other_users_holding_is_404(self, client, auth_headers, make_holding, db):
        theirs = make_holding("INFY", user_id=OTHER_USER_ID)

        response = client.delete(f"/api/holdings/{theirs.id}", headers=auth_headers)

        assert response.status_code == 404
        assert db.get(Holding, theirs.id) is not None
