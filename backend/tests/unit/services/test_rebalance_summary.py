"""Tests for the weekly rebalance AI summary."""

import asyncio

from portfolio_tracker.services.ai import (
    AIGatewayCreditsError,
    build_rebalance_prompt,
    summarize_rebalance,
)
from portfolio_tracker.services.portfolio.rebalance_service import UserRebalanceReport

REPORTS = [
    UserRebalanceReport(
        user_id="user-1",
        recommendations=["High concentration in IT (100.0%). Consider diversifying."],
    )
]


class FakeGateway:
    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.requests: list[list[dict]] = []

    async def complete(self, messages):
        self.requests.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class TestBuildRebalancePrompt:
    def test_includes_every_report(self):
        prompt = build_rebalance_prompt(REPORTS)

        assert '"user_id": "user-1"' in prompt
        assert "High concentration in IT (100.0%)" in prompt
        assert "2-3 sentence summary" in prompt


class TestSummarizeRebalance:
    """Test summarize_rebalance."""

    def test_returns_stripped_summary(self):
        gateway = FakeGateway(reply="\n  Most portfolios lean heavily on IT.  \n")

        summary = asyncio.run(summarize_rebalance(REPORTS, gateway))

        assert summary == "Most portfolios lean heavily on IT."
        [messages] = gateway.requests
        assert messages[0]["role"] == "user"
        assert "user-1" in messages[0]["content"]

    def test_gateway_error_gives_none(self):
        gateway = FakeGateway(error=AIGatewayCreditsError("out of credits", status_code=402))

        assert asyncio.run(summarize_rebalance(REPORTS, gateway)) is None
        assert len(gateway.requests) == 1

    def test_nothing_flagged_skips_gateway(self):
        gateway = FakeGateway(reply="unused")

        assert asyncio.run(summarize_rebalance([], gateway)) is None
        assert gateway.requests == []

    def test_no_gateway(self):
        assert asyncio.run(summarize_rebalance(REPORTS, None)) is None
