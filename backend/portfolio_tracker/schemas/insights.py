"""Pydantic schemas for AI portfolio insights."""

from typing import Literal

from pydantic import BaseModel, Field


class Insight(BaseModel):
    """One advisory insight about a portfolio."""

    type: Literal["alert", "suggestion", "opportunity", "info"]
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1)
    priority: Literal["high", "medium", "low"]


class InsightsResponse(BaseModel):
    """Insights endpoint response; ``error`` is set when a fallback was served."""

    insights: list[Insight]
    error: str | None = None
