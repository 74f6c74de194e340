from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PriceListItem(BaseModel):
    name: str
    unit_price: Decimal
    category_name: str


class StockBalanceItem(BaseModel):
    name: str
    quantity_in_stock: int
    total_value: Decimal


class BelowMinStockProduct(BaseModel):
    name: str
    quantity_in_stock: int
    min_stock_quantity: int


class ProductCountByCategory(BaseModel):
    category_name: str
    product_count: int


class TopMovementProduct(BaseModel):
    product_name: str
    movement_count: int


class TopMovementProducts(BaseModel):
    top_entry_product: Optional[TopMovementProduct] = None
    top_exit_product: Optional[TopMovementProduct] = None
