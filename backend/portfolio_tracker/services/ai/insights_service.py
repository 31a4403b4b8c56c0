"""AI-generated portfolio insights.

The prompt is built from freshly computed valuation numbers. Whatever the
model returns is validated against the ``Insight`` schema; anything that does
not fit is replaced by a static fallback insight, so callers never see a raw
parse error.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from pydantic import TypeAdapter, ValidationError

from portfolio_tracker.models import Holding
from portfolio_tracker.schemas.insights import Insight
from portfolio_tracker.services.ai.gateway_client import AIGatewayClient
from portfolio_tracker.services.ai.json_helpers import extract_json_array
from portfolio_tracker.services.portfolio.valuation_service import value_portfolio
from portfolio_tracker.services.portfolio.valuation_types import PortfolioValuation

logger = logging.getLogger(__name__)

_insight_list = TypeAdapter(list[Insight])

ONBOARDING_INSIGHT = Insight(
    type="info",
    title="Start Your Investment Journey",
    description=(
        "Add your first holdings to get personalized AI-powered portfolio insights "
        "and recommendations."
    ),
    priority="low",
)

FALLBACK_INSIGHT = Insight(
    type="suggestion",
    title="Portfolio Review",
    description=(
        "Your portfolio is being analyzed. Check back in a moment for personalized insights."
    ),
    priority="low",
)

UNAVAILABLE_INSIGHT = Insight(
    type="alert",
    title="Analysis Unavailable",
    description="Unable to analyze portfolio at this time. Please try again later.",
    priority="low",
)

SYSTEM_PROMPT = """You are an expert Indian financial advisor AI. Analyze the user's portfolio and provide 3 actionable insights.

Rules:
1. Speak in simple, friendly Hindi-English mix that Indian retail investors understand
2. Use ₹ for amounts and explain in lakhs/crores when appropriate
3. Focus on: diversification gaps, concentration risks, rebalancing needs, and opportunities
4. Be specific with numbers from their portfolio
5. Each insight should have a clear action item
6. Consider Indian market context (NSE/BSE, Indian sectors, tax rules like LTCG/STCG)

Respond ONLY with a valid JSON array of exactly 3 insights in this format:
[
  {
    "type": "alert|suggestion|opportunity",
    "title": "Brief title (max 5 words)",
    "description": "Clear explanation with specific numbers and action (2-3 sentences max)",
    "priority": "high|medium|low"
  }
]

Priority guide:
- high: Immediate action needed (concentration risk >40%, severe imbalance)
- medium: Should address soon (minor rebalancing, missed opportunities)
- low: Good to know (tax tips, small optimizations)"""


def _rupees(amount: Decimal) -> str:
    return f"₹{amount:,.2f}"


def _signed_pct(value: Decimal) -> str:
    return f"{value:+.2f}%"


def build_portfolio_prompt(
    holdings: Sequence[Holding],
    valuation: PortfolioValuation,
) -> str:
    """Render the portfolio as the user message sent to the model."""
    lines = [
        "Portfolio Analysis Request:",
        "",
        f"**Total Portfolio Value:** {_rupees(valuation.total_value)}",
        f"**Overall Returns:** {_signed_pct(valuation.total_pnl_percent)}",
        "",
        f"**Holdings ({len(holdings)} assets):**",
    ]
    for holding, holding_value in zip(holdings, valuation.holdings, strict=True):
        lines.append(
            f"- {holding.name} ({holding.symbol}): {_rupees(holding_value.value)} | "
            f"{holding.asset_type} | Sector: {holding.sector or 'Unspecified'} | "
            f"Returns: {_signed_pct(holding_value.pnl_percent)}"
        )

    lines += ["", "**Sector Allocation:**"]
    lines += [f"- {entry.name}: {entry.percentage}%" for entry in valuation.sector_allocation]

    lines += ["", "**Asset Type Breakdown:**"]
    lines += [
        f"- {entry.asset_type}: {_rupees(entry.value)} ({entry.percentage}%)"
        for entry in valuation.asset_type_allocation
    ]
    return "\n".join(lines)


def parse_insights(content: str) -> list[Insight]:
    """Validate model output as a list of insights, falling back on any problem."""
    try:
        insights = _insight_list.validate_python(extract_json_array(content))
    except (ValueError, ValidationError) as e:
        logger.warning(f"Failed to parse AI insights: {e}")
        return [FALLBACK_INSIGHT]

    if not insights:
        logger.warning("AI returned an empty insight list")
        return [FALLBACK_INSIGHT]
    return insights


async def generate_insights(
    holdings: Sequence[Holding],
    gateway: AIGatewayClient,
) -> list[Insight]:
    """Ask the model for insights about a portfolio.

    Args:
        holdings: The user's holdings with current prices
        gateway: Chat-completions client

    Returns:
        Validated insights, or a single fallback insight

    Raises:
        AIGatewayError: If the gateway itself fails (subclasses for 429/402)
    """
    if not holdings:
        return [ONBOARDING_INSIGHT]

    valuation = value_portfolio(holdings)
    prompt = build_portfolio_prompt(holdings, valuation)

    logger.info(f"Requesting portfolio insights for {len(holdings)} holdings")
    content = await gateway.complete(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
    )
    logger.debug(f"AI insights response: {content[:500]}")
    return parse_insights(content)
