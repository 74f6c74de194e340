from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from core.auth import current_actor
from core.permissions import Actor
from db.database import get_async_session
from schemas.reports import (
    BelowMinStockProduct,
    PriceListItem,
    ProductCountByCategory,
    StockBalanceItem,
    TopMovementProducts,
)
from services import reports as report_service

router = APIRouter()


@router.get("/price-list", response_model=List[PriceListItem])
async def get_price_list(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return await report_service.price_list(db, actor)


@router.get("/stock-balance", response_model=List[StockBalanceItem])
async def get_stock_balance(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Quantity and total value (unit price x quantity) of each visible product"""
    return await report_service.stock_balance(db, actor)


@router.get("/below-min-stock", response_model=List[BelowMinStockProduct])
async def get_below_min_stock(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return await report_service.below_min_stock(db, actor)


@router.get("/product-count-by-category", response_model=List[ProductCountByCategory])
async def get_product_count_by_category(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return await report_service.product_count_by_category(db, actor)


@router.get("/top-movement-products", response_model=TopMovementProducts)
async def get_top_movement_products(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    # Counted over all movements, not only the caller's categories
    return await report_service.top_movement_products(db)
