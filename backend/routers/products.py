from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import current_actor, current_admin
from core.permissions import Actor
from db.database import get_async_session
from schemas.products import (
    PriceAdjustment,
    PriceAdjustmentResult,
    ProductCreate,
    ProductDetailRead,
    ProductRead,
    ProductUpdate,
)
from services import products as product_service

router = APIRouter()


@router.get("/", response_model=List[ProductRead])
async def list_products(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """List products; employees only see products from their assigned categories"""
    items = await product_service.list_products(db, actor)
    return [ProductRead(**p.to_schema) for p in items]


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    product = await product_service.create_product(db, actor, payload)
    return ProductRead(**product.to_schema)


@router.post("/adjust-price", response_model=PriceAdjustmentResult)
async def adjust_price(
    payload: PriceAdjustment,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Adjust every product price by a percentage (admin only)"""
    updated = await product_service.adjust_all_prices(db, payload.percentage)
    return PriceAdjustmentResult(
        percentage=payload.percentage,
        updated=updated,
        message=f"Product prices adjusted successfully by {payload.percentage}%.",
    )


@router.get("/{product_id}", response_model=ProductDetailRead)
async def get_product(
    product_id: UUID,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Get a product with its movement history"""
    detail = await product_service.get_product(db, actor, product_id)
    return ProductDetailRead(**detail.to_schema)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    product = await product_service.update_product(db, actor, product_id, payload)
    return ProductRead(**product.to_schema)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    await product_service.delete_product(db, actor, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
