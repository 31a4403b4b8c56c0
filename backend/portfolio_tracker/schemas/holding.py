"""Pydantic schemas for Holding model."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

AssetType = Literal["stock", "mutual_fund", "etf", "debt"]


def _normalize_symbol(value: str) -> str:
    symbol = value.strip().upper()
    if not symbol:
        raise ValueError("symbol must not be blank")
    return symbol


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class HoldingBase(BaseModel):
    """Base Holding schema with common fields."""

    symbol: str = Field(..., max_length=50, description="Ticker symbol, e.g. TCS or NIFTYBEES")
    name: str = Field(..., min_length=1, max_length=200)
    asset_type: AssetType
    quantity: Decimal = Field(..., ge=0, description="Units held")
    buy_price: Decimal = Field(..., gt=0, description="Average purchase price per unit")
    sector: str | None = Field(None, max_length=100)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)

    @field_validator("sector")
    @classmethod
    def normalize_sector(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class HoldingCreate(HoldingBase):
    """Schema for creating a new Holding.

    ``current_price`` defaults to ``buy_price`` until the first refresh.
    """

    current_price: Decimal | None = Field(None, gt=0)

    @model_validator(mode="after")
    def default_current_price(self) -> "HoldingCreate":
        if self.current_price is None:
            self.current_price = self.buy_price
        return self


class HoldingUpdate(BaseModel):
    """Schema for updating an existing Holding."""

    symbol: str | None = Field(None, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    asset_type: AssetType | None = None
    quantity: Decimal | None = Field(None, ge=0)
    buy_price: Decimal | None = Field(None, gt=0)
    current_price: Decimal | None = Field(None, gt=0)
    sector: str | None = Field(None, max_length=100)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_symbol(value)

    @field_validator("sector")
    @classmethod
    def normalize_sector(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class Holding(HoldingBase):
    """Schema for Holding responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    current_price: Decimal
    created_at: datetime
    updated_at: datetime


class HoldingWithValuation(Holding):
    """Holding response including computed value and P&L."""

    value: Decimal
    invested: Decimal
    pnl: Decimal
    pnl_percent: Decimal
