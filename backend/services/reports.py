"""
Read-only stock reports.

All reports except the movement leaders go through the same category
visibility as the product list. Movement leaders count every movement in the
store regardless of the caller's categories.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.permissions import Actor, visible_category_ids
from db.models import MOVEMENT_ENTRY, MOVEMENT_EXIT, Category, Product, StockMovement
from services.products import list_products


async def price_list(db: AsyncSession, actor: Actor) -> List[dict]:
    return [
        {
            "name": p.name,
            "unit_price": p.unit_price,
            "category_name": p.category.name,
        }
        for p in await list_products(db, actor)
    ]


async def stock_balance(db: AsyncSession, actor: Actor) -> List[dict]:
    return [
        {
            "name": p.name,
            "quantity_in_stock": p.quantity_in_stock,
            "total_value": Decimal(p.unit_price) * p.quantity_in_stock,
        }
        for p in await list_products(db, actor)
    ]


async def below_min_stock(db: AsyncSession, actor: Actor) -> List[dict]:
    stmt = (
        select(Product)
        .where(Product.quantity_in_stock < Product.min_stock_quantity)
        .order_by(Product.name.asc())
    )
    allowed = visible_category_ids(actor)
    if allowed is not None:
        stmt = stmt.where(Product.category_id.in_(allowed))

    res = await db.execute(stmt)
    return [
        {
            "name": p.name,
            "quantity_in_stock": p.quantity_in_stock,
            "min_stock_quantity": p.min_stock_quantity,
        }
        for p in res.scalars().all()
    ]


async def product_count_by_category(db: AsyncSession, actor: Actor) -> List[dict]:
    stmt = (
        select(Category.name, func.count(Product.id))
        .select_from(Category)
        .join(Product, Product.category_id == Category.id)
        .group_by(Category.name)
        .order_by(Category.name.asc())
    )
    allowed = visible_category_ids(actor)
    if allowed is not None:
        stmt = stmt.where(Product.category_id.in_(allowed))

    res = await db.execute(stmt)
    return [{"category_name": name, "product_count": int(count)} for name, count in res.all()]


async def top_movement_product(db: AsyncSession, movement_type: str) -> Optional[dict]:
    """Product with the most movements of the given type, or None."""
    movement_count = func.count(StockMovement.id).label("movement_count")
    stmt = (
        select(Product.name, movement_count)
        .select_from(StockMovement)
        .join(Product, StockMovement.product_id == Product.id)
        .where(StockMovement.type == movement_type)
        .group_by(Product.name)
        .order_by(movement_count.desc(), Product.name.asc())
        .limit(1)
    )
    row = (await db.execute(stmt)).first()
    if row is None:
        return None
    return {"product_name": row[0], "movement_count": int(row[1])}


async def top_movement_products(db: AsyncSession) -> dict:
    return {
        "top_entry_product": await top_movement_product(db, MOVEMENT_ENTRY),
        "top_exit_product": await top_movement_product(db, MOVEMENT_EXIT),
    }
