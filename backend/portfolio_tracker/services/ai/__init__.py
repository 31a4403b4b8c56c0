"""Language-model gateway integration."""

from .gateway_client import (
    AIGatewayClient,
    AIGatewayCreditsError,
    AIGatewayError,
    AIGatewayRateLimitError,
)
from .insights_service import (
    FALLBACK_INSIGHT,
    ONBOARDING_INSIGHT,
    UNAVAILABLE_INSIGHT,
    build_portfolio_prompt,
    generate_insights,
    parse_insights,
)
from .rebalance_summary import build_rebalance_prompt, summarize_rebalance

__all__ = [
    "AIGatewayClient",
    "AIGatewayCreditsError",
    "AIGatewayError",
    "AIGatewayRateLimitError",
    "FALLBACK_INSIGHT",
    "ONBOARDING_INSIGHT",
    "UNAVAILABLE_INSIGHT",
    "build_portfolio_prompt",
    "build_rebalance_prompt",
    "generate_insights",
    "parse_insights",
    "summarize_rebalance",
]
