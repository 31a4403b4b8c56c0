"""Client for the OpenAI-compatible AI gateway (chat completions)."""

import logging
from typing import Any

import httpx

from portfolio_tracker.config import settings
from portfolio_tracker.services.shared.http_client import AsyncHTTPClient, HTTPClientError

logger = logging.getLogger(__name__)


class AIGatewayError(Exception):
    """The gateway could not produce a completion."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AIGatewayRateLimitError(AIGatewayError):
    """Gateway answered 429: too many requests."""


class AIGatewayCreditsError(AIGatewayError):
    """Gateway answered 402: the account is out of credits."""


class AIGatewayClient(AsyncHTTPClient):
    """Chat-completions client.

    Usage:
        async with AIGatewayClient() as gateway:
            text = await gateway.complete([{"role": "user", "content": "Hi"}])
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        if not self.api_key:
            raise AIGatewayError("AI_GATEWAY_API_KEY is not configured")

        super().__init__(
            base_url=base_url or settings.ai_gateway_url,
            timeout=settings.ai_request_timeout,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        self.model = model or settings.ai_model

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send a conversation and return the assistant's reply text.

        Raises:
            AIGatewayRateLimitError: On HTTP 429
            AIGatewayCreditsError: On HTTP 402
            AIGatewayError: On any other failure or an empty reply
        """
        try:
            data: Any = await self.post_json(
                "/v1/chat/completions",
                json={"model": self.model, "messages": messages},
            )
        except HTTPClientError as e:
            if e.status_code == 429:
                raise AIGatewayRateLimitError(
                    "Rate limit exceeded. Please try again later.", status_code=429
                ) from e
            if e.status_code == 402:
                raise AIGatewayCreditsError(
                    "AI credits exhausted. Please add credits.", status_code=402
                ) from e
            raise AIGatewayError(f"AI gateway error: {e}", status_code=e.status_code) from e
        except ValueError as e:
            raise AIGatewayError(f"AI gateway returned invalid JSON: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIGatewayError("AI gateway response has no message content") from e

        if not isinstance(content, str) or not content.strip():
            raise AIGatewayError("AI gateway returned an empty message")
        return content
