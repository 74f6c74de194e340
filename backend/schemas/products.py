from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from schemas.stock_movements import StockMovementRead


class CategoryInfo(BaseModel):
    id: UUID
    name: str


class ProductCreate(BaseModel):
    name: str
    unit_price: Decimal = Field(ge=0, max_digits=19, decimal_places=2)
    unit_of_measure: Optional[str] = None
    quantity_in_stock: int = Field(default=0, ge=0)
    min_stock_quantity: int = Field(default=0, ge=0)
    max_stock_quantity: int = Field(default=0, ge=0)
    category_id: UUID

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=19, decimal_places=2)
    unit_of_measure: Optional[str] = None
    quantity_in_stock: Optional[int] = Field(default=None, ge=0)
    min_stock_quantity: Optional[int] = Field(default=None, ge=0)
    max_stock_quantity: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v


class ProductRead(BaseModel):
    id: UUID
    name: str
    unit_price: Decimal
    unit_of_measure: Optional[str] = None
    quantity_in_stock: int
    min_stock_quantity: int
    max_stock_quantity: int
    category_id: UUID
    category: Optional[CategoryInfo] = None


class ProductDetailRead(ProductRead):
    movements: List[StockMovementRead] = []


class PriceAdjustment(BaseModel):
    # Negative values are discounts; the result is not floored at zero
    percentage: Decimal


class PriceAdjustmentResult(BaseModel):
    percentage: Decimal
    updated: int
    message: str
