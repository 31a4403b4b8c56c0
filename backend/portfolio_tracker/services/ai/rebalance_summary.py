"""AI summary of the weekly rebalance check across all portfolios."""

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict

from portfolio_tracker.services.ai.gateway_client import AIGatewayClient, AIGatewayError
from portfolio_tracker.services.portfolio.rebalance_service import UserRebalanceReport

logger = logging.getLogger(__name__)


def build_rebalance_prompt(reports: Sequence[UserRebalanceReport]) -> str:
    recommendations = json.dumps([asdict(r) for r in reports], indent=2, ensure_ascii=False)
    return (
        "You are a portfolio analyst. Summarize these rebalancing recommendations "
        "in a brief, actionable format:\n\n"
        f"{recommendations}\n\n"
        "Provide a 2-3 sentence summary of the key rebalancing themes across all portfolios."
    )


async def summarize_rebalance(
    reports: Sequence[UserRebalanceReport],
    gateway: AIGatewayClient | None,
) -> str | None:
    """Summarize flagged portfolios in a few sentences.

    The summary is optional: None when nothing was flagged, no gateway is
    configured, or the gateway call fails for any reason.
    """
    if not reports or gateway is None:
        return None

    try:
        summary = await gateway.complete(
            [{"role": "user", "content": build_rebalance_prompt(reports)}]
        )
    except AIGatewayError as e:
        logger.warning(f"Rebalance AI summary failed: {e}")
        return None

    return summary.strip()
