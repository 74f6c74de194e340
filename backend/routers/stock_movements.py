from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from core.auth import current_actor
from core.permissions import Actor
from db.database import get_async_session
from schemas.stock_movements import (
    MovementType,
    StockMovementCreate,
    StockMovementRead,
    StockMovementResult,
)
from services import stock_movements as ledger

router = APIRouter()


@router.post("/entry", response_model=StockMovementResult, status_code=status.HTTP_201_CREATED)
async def register_entry(
    payload: StockMovementCreate,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Register a stock entry. May carry a warning about the maximum level."""
    result = await ledger.register_entry(db, actor, payload.product_id, payload.quantity)
    return StockMovementResult(**result.to_schema)


@router.post("/exit", response_model=StockMovementResult, status_code=status.HTTP_201_CREATED)
async def register_exit(
    payload: StockMovementCreate,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Register a stock exit. May carry a warning about the minimum level."""
    result = await ledger.register_exit(db, actor, payload.product_id, payload.quantity)
    return StockMovementResult(**result.to_schema)


@router.get("/", response_model=List[StockMovementRead])
async def list_movements(
    product_id: Optional[UUID] = None,
    type: Optional[MovementType] = None,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    movements = await ledger.list_movements(db, actor, product_id=product_id, movement_type=type)
    return [StockMovementRead(**m.to_schema) for m in movements]
