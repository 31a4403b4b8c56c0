"""Holding model - a user's position in one instrument."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from portfolio_tracker.database import Base


class Holding(Base):
    """Holding model representing one user's position in a stock, fund, ETF or debt instrument."""

    __tablename__ = "holdings"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_holdings_quantity_non_negative"),
        CheckConstraint("buy_price > 0", name="ck_holdings_buy_price_positive"),
        CheckConstraint("current_price > 0", name="ck_holdings_current_price_positive"),
        Index("idx_holdings_user", "user_id"),
        Index("idx_holdings_asset_type", "asset_type"),
        Index("idx_holdings_symbol", "symbol"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(36))
    symbol: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(200))
    asset_type: Mapped[str] = mapped_column(String(20))  # See constants.InstrumentType
    quantity: Mapped[Decimal] = mapped_column(Numeric(20, 8))
    buy_price: Mapped[Decimal] = mapped_column(Numeric(15, 4))
    current_price: Mapped[Decimal] = mapped_column(Numeric(15, 4))
    sector: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Holding(id={self.id}, symbol='{self.symbol}', quantity={self.quantity})>"
