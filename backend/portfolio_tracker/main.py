"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from portfolio_tracker import __version__
from portfolio_tracker.config import settings
from portfolio_tracker.rate_limiter import limiter
from portfolio_tracker.routers import holdings, insights, portfolio, prices
from portfolio_tracker.services.market_data import QuoteCache

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One quote cache per process, shared by every request
    app.state.quote_cache = QuoteCache(settings.quote_cache_ttl_seconds)
    logger.info(f"Quote cache ready (ttl={settings.quote_cache_ttl_seconds}s)")
    yield
    app.state.quote_cache.clear()


# Create FastAPI app
app = FastAPI(
    title="Portfolio Tracker API",
    description="Holdings, live prices, valuation and AI insights for Indian retail portfolios",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Portfolio Tracker API", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(holdings.router)
app.include_router(portfolio.router)
app.include_router(prices.router)
app.include_router(insights.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("portfolio_tracker.main:app", host="0.0.0.0", port=8000, reload=True)
