"""Holdings API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies.auth import get_current_user_id
from portfolio_tracker.models import Holding
from portfolio_tracker.schemas import Holding as HoldingSchema
from portfolio_tracker.schemas import (
    HoldingCreate,
    HoldingUpdate,
    HoldingWithValuation,
    MessageResponse,
)
from portfolio_tracker.services.portfolio import value_holding
from portfolio_tracker.services.repositories import HoldingRepository, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/holdings", tags=["holdings"])


def holding_with_valuation(holding: Holding) -> HoldingWithValuation:
    """Serialize a holding together with its computed value and P&L."""
    valuation = value_holding(holding)
    return HoldingWithValuation(
        **HoldingSchema.model_validate(holding).model_dump(),
        value=valuation.value,
        invested=valuation.invested,
        pnl=valuation.pnl,
        pnl_percent=valuation.pnl_percent,
    )


def _get_owned_holding(repo: HoldingRepository, holding_id: int, user_id: str) -> Holding:
    try:
        return repo.get_for_user(holding_id, user_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Holding with id {holding_id} not found"
        ) from e


@router.get("", response_model=list[HoldingWithValuation])
async def list_holdings(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Get the current user's holdings, newest first, with valuation fields."""
    holdings = HoldingRepository(db).list_for_user(user_id)
    return [holding_with_valuation(h) for h in holdings]


@router.get("/{holding_id}", response_model=HoldingWithValuation)
async def get_holding(
    holding_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Get a specific holding by ID (must belong to the current user)."""
    holding = _get_owned_holding(HoldingRepository(db), holding_id, user_id)
    return holding_with_valuation(holding)


@router.post("", response_model=HoldingWithValuation, status_code=status.HTTP_201_CREATED)
async def create_holding(
    holding_data: HoldingCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Create a new holding for the current user.

    The symbol is stored upper-cased; ``current_price`` starts at ``buy_price``
    unless given.
    """
    holding = HoldingRepository(db).create(user_id, **holding_data.model_dump())
    db.commit()
    db.refresh(holding)
    logger.info(f"Created holding {holding.id} ({holding.symbol}) for user {user_id}")
    return holding_with_valuation(holding)


@router.patch("/{holding_id}", response_model=HoldingWithValuation)
async def update_holding(
    holding_id: int,
    holding_data: HoldingUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Update a holding. Only fields present in the request body are changed."""
    repo = HoldingRepository(db)
    holding = _get_owned_holding(repo, holding_id, user_id)

    update_data = holding_data.model_dump(exclude_unset=True)
    for field in ("symbol", "name", "asset_type", "quantity", "buy_price", "current_price"):
        if field in update_data and update_data[field] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be null"
            )

    repo.update_fields(holding, **update_data)
    db.commit()
    db.refresh(holding)
    return holding_with_valuation(holding)


@router.delete("/{holding_id}", response_model=MessageResponse)
async def delete_holding(
    holding_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete a holding owned by the current user."""
    repo = HoldingRepository(db)
    holding = _get_owned_holding(repo, holding_id, user_id)
    symbol = holding.symbol
    repo.delete(holding)
    db.commit()
    logger.info(f"Deleted holding {holding_id} ({symbol}) for user {user_id}")
    return {"message": f"Holding {holding_id} deleted"}
