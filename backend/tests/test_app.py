"""Tests for application wiring."""

from portfolio_tracker.main import app
from portfolio_tracker.services.market_data import QuoteCache


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_quote_cache_built_at_startup(client):
    cache = app.state.quote_cache

    assert isinstance(cache, QuoteCache)
    assert cache.ttl_seconds == 300
