"""Shared test fixtures: in-memory database, auth tokens and a fake quote source."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_tracker.config import settings
from portfolio_tracker.database import Base, get_db
from portfolio_tracker.dependencies.market_data import get_price_fetcher
from portfolio_tracker.main import app
from portfolio_tracker.models import Holding
from portfolio_tracker.rate_limiter import limiter
from portfolio_tracker.services.market_data import (
    BatchPriceFetcher,
    Quote,
    QuoteCache,
    QuoteFailure,
    QuoteFailureReason,
)

TEST_USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"
SERVICE_KEY = "test-service-key"


class FakeQuoteSource:
    """In-memory quote source that records every symbol it was asked for.

    Symbols in ``prices`` succeed, symbols in ``errors`` raise the mapped
    exception, anything else comes back as a NO_DATA failure.
    """

    def __init__(self, prices: dict[str, str] | None = None):
        self.prices = {symbol: Decimal(price) for symbol, price in (prices or {}).items()}
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    async def fetch_quote(self, symbol: str):
        self.calls.append(symbol)
        if symbol in self.errors:
            raise self.errors[symbol]
        if symbol in self.prices:
            return Quote(symbol=symbol, price=self.prices[symbol])
        return QuoteFailure(symbol, QuoteFailureReason.NO_DATA, "No data found")


def make_token(user_id: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Sign an access token the way the auth provider does."""
    payload = {"sub": user_id, "exp": datetime.now(UTC) + expires_in}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    """Create a fresh database session for each test."""
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_holding(db):
    """Factory that inserts and commits a holding."""

    def _make(
        symbol: str = "TCS",
        *,
        user_id: str = TEST_USER_ID,
        name: str | None = None,
        asset_type: str = "stock",
        quantity: str = "10",
        buy_price: str = "3000",
        current_price: str | None = None,
        sector: str | None = "IT",
    ) -> Holding:
        holding = Holding(
            user_id=user_id,
            symbol=symbol,
            name=name or symbol,
            asset_type=asset_type,
            quantity=Decimal(quantity),
            buy_price=Decimal(buy_price),
            current_price=Decimal(current_price or buy_price),
            sector=sector,
        )
        db.add(holding)
        db.commit()
        return holding

    return _make


@pytest.fixture
def quote_source():
    return FakeQuoteSource()


@pytest.fixture
def quote_cache():
    return QuoteCache(ttl_seconds=300)


@pytest.fixture
def client(db, quote_source, quote_cache):
    """Test client wired to the in-memory database and the fake quote source."""
    limiter.reset()

    def override_get_db():
        yield db

    def override_get_price_fetcher():
        return BatchPriceFetcher(quote_source, quote_cache)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_fetcher] = override_get_price_fetcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token(TEST_USER_ID)}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


@pytest.fixture
def service_headers(monkeypatch):
    monkeypatch.setattr(settings, "service_api_key", SERVICE_KEY)
    return {"X-Service-Key": SERVICE_KEY}
