"""
Product catalog: CRUD, category-scoped listing and bulk price adjustment.

Every single-product read or mutation goes through check_category_access()
before anything is returned or written.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import ProductInUseError, ProductNotFoundError
from core.permissions import Actor, check_category_access, visible_category_ids
from db.models import Product, StockMovement
from schemas.products import ProductCreate, ProductUpdate
from services.categories import find_category
from services.common import unit_of_work

logger = logging.getLogger(__name__)


@dataclass
class ProductDetail:
    product: Product
    movements: List[StockMovement] = field(default_factory=list)

    @property
    def to_schema(self):
        return {
            **self.product.to_schema,
            "movements": [m.to_schema for m in self.movements],
        }


def visible_products_query(actor: Actor) -> Select:
    """Products the actor may see, ordered by name."""
    stmt = select(Product).options(selectinload(Product.category)).order_by(Product.name.asc())
    allowed = visible_category_ids(actor)
    if allowed is not None:
        stmt = stmt.where(Product.category_id.in_(allowed))
    return stmt


async def find_product(db: AsyncSession, product_id: UUID) -> Product:
    res = await db.execute(
        select(Product).options(selectinload(Product.category)).where(Product.id == product_id)
    )
    product = res.scalar_one_or_none()
    if not product:
        raise ProductNotFoundError(product_id)
    return product


async def find_accessible_product(db: AsyncSession, actor: Actor, product_id: UUID) -> Product:
    product = await find_product(db, product_id)
    check_category_access(actor, product.category_id)
    return product


async def list_products(db: AsyncSession, actor: Actor) -> List[Product]:
    res = await db.execute(visible_products_query(actor))
    return list(res.scalars().all())


async def get_product(db: AsyncSession, actor: Actor, product_id: UUID) -> ProductDetail:
    product = await find_accessible_product(db, actor, product_id)
    res = await db.execute(
        select(StockMovement)
        .options(selectinload(StockMovement.product))
        .where(StockMovement.product_id == product_id)
        .order_by(StockMovement.movement_date.asc(), StockMovement.id.asc())
    )
    return ProductDetail(product=product, movements=list(res.scalars().all()))


async def create_product(db: AsyncSession, actor: Actor, payload: ProductCreate) -> Product:
    async with unit_of_work(db, "create_product"):
        category = await find_category(db, payload.category_id)
        check_category_access(actor, category.id)

        # Opening balance: no movement is recorded for it
        product = Product(
            name=payload.name,
            unit_price=payload.unit_price,
            unit_of_measure=payload.unit_of_measure,
            quantity_in_stock=payload.quantity_in_stock,
            min_stock_quantity=payload.min_stock_quantity,
            max_stock_quantity=payload.max_stock_quantity,
            category_id=category.id,
        )
        product.category = category
        db.add(product)
    logger.info("Created product %s (%s) in category %s", product.id, product.name, category.id)
    return product


async def update_product(db: AsyncSession, actor: Actor, product_id: UUID, payload: ProductUpdate) -> Product:
    async with unit_of_work(db, "update_product"):
        product = await find_accessible_product(db, actor, product_id)

        data = payload.model_dump(exclude_unset=True)
        new_category_id = data.pop("category_id", None)
        if new_category_id is not None and new_category_id != product.category_id:
            category = await find_category(db, new_category_id)
            check_category_access(actor, category.id)
            product.category_id = category.id
            product.category = category

        for key in (
            "name",
            "unit_price",
            "unit_of_measure",
            "quantity_in_stock",
            "min_stock_quantity",
            "max_stock_quantity",
        ):
            if key in data and (data[key] is not None or key == "unit_of_measure"):
                setattr(product, key, data[key])
    return product


async def delete_product(db: AsyncSession, actor: Actor, product_id: UUID) -> None:
    async with unit_of_work(db, "delete_product"):
        product = await find_accessible_product(db, actor, product_id)
        res = await db.execute(
            select(func.count(StockMovement.id)).where(StockMovement.product_id == product_id)
        )
        if res.scalar_one():
            raise ProductInUseError(product_id)
        await db.delete(product)
    logger.info("Deleted product %s", product_id)


async def adjust_all_prices(db: AsyncSession, percentage: Decimal) -> int:
    """
    Multiply every unit price by (1 + percentage / 100) in one UPDATE.

    Negative percentages are discounts. Results are not clamped, so a
    discount above 100% yields negative prices.
    """
    factor = Decimal(1) + Decimal(percentage) / Decimal(100)
    async with unit_of_work(db, "adjust_all_prices"):
        res = await db.execute(
            update(Product)
            .values(unit_price=Product.unit_price * factor)
            .execution_options(synchronize_session="fetch")
        )
    logger.info("Adjusted %s product price(s) by %s%%", res.rowcount, percentage)
    return res.rowcount
