from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


MovementType = Literal["ENTRY", "EXIT"]


class StockMovementCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(gt=0)


class StockMovementRead(BaseModel):
    id: UUID
    product_id: UUID
    product_name: Optional[str] = None
    movement_date: datetime
    quantity: int
    type: MovementType


class StockMovementResult(StockMovementRead):
    warning: Optional[str] = None
