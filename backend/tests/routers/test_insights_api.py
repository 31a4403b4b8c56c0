"""Tests for the AI insights API."""

import json

import pytest

from portfolio_tracker.dependencies.market_data import get_ai_gateway
from portfolio_tracker.main import app
from portfolio_tracker.services.ai import (
    AIGatewayCreditsError,
    AIGatewayError,
    AIGatewayRateLimitError,
)

REPLY = json.dumps(
    [
        {"type": "alert", "title": "Too Much IT", "description": "IT is 100%.", "priority": "high"},
        {"type": "suggestion", "title": "Add Debt", "description": "Add a debt fund.", "priority": "medium"},
        {"type": "opportunity", "title": "SIP", "description": "Start a SIP.", "priority": "low"},
    ]
)


class FakeGateway:
    def __init__(self, reply=REPLY, error=None):
        self.reply = reply
        self.error = error
        self.calls = 0

    async def complete(self, messages):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def gateway(client):
    fake = FakeGateway()
    app.dependency_overrides[get_ai_gateway] = lambda: fake
    return fake


class TestInsights:
    """POST /api/insights."""

    def test_insights(self, client, gateway, auth_headers, make_holding):
        make_holding("TCS")

        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [i["type"] for i in data["insights"]] == ["alert", "suggestion", "opportunity"]
        assert data["error"] is None

    def test_empty_portfolio_gets_onboarding(self, client, gateway, auth_headers):
        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["insights"][0]["title"] == "Start Your Investment Journey"
        assert gateway.calls == 0

    def test_malformed_reply_falls_back(self, client, gateway, auth_headers, make_holding):
        make_holding("TCS")
        gateway.reply = "I am not JSON"

        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["insights"][0]["title"] == "Portfolio Review"

    def test_gateway_rate_limit_is_429(self, client, gateway, auth_headers, make_holding):
        make_holding("TCS")
        gateway.error = AIGatewayRateLimitError("Rate limit exceeded.", status_code=429)

        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 429

    def test_gateway_credits_is_402(self, client, gateway, auth_headers, make_holding):
        make_holding("TCS")
        gateway.error = AIGatewayCreditsError("AI credits exhausted.", status_code=402)

        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 402

    def test_other_gateway_error_is_500_with_fallback(
        self, client, gateway, auth_headers, make_holding
    ):
        make_holding("TCS")
        gateway.error = AIGatewayError("AI gateway error: HTTP 500", status_code=500)

        response = client.post("/api/insights", headers=auth_headers)

        assert response.status_code == 500
        data = response.json()
        assert data["insights"][0]["title"] == "Analysis Unavailable"
        assert "HTTP 500" in data["error"]
