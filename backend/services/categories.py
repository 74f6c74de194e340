import logging
from dataclasses import dataclass
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import CategoryAssignedError, CategoryInUseError, CategoryNotFoundError
from core.permissions import Actor, visible_category_ids
from db.models import Category, Product, user_categories
from schemas.categories import CategoryCreate, CategoryUpdate
from services.common import unit_of_work

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryWithCount:
    category: Category
    product_count: int

    @property
    def to_schema(self):
        return {**self.category.to_schema, "product_count": self.product_count}


async def find_category(db: AsyncSession, category_id: UUID) -> Category:
    res = await db.execute(select(Category).where(Category.id == category_id))
    category = res.scalar_one_or_none()
    if not category:
        raise CategoryNotFoundError(category_id)
    return category


async def _count_products(db: AsyncSession, category_id: UUID) -> int:
    res = await db.execute(select(func.count(Product.id)).where(Product.category_id == category_id))
    return int(res.scalar_one())


async def _count_assigned_users(db: AsyncSession, category_id: UUID) -> int:
    res = await db.execute(
        select(func.count()).select_from(user_categories).where(user_categories.c.category_id == category_id)
    )
    return int(res.scalar_one())


async def list_categories(db: AsyncSession, actor: Actor) -> List[CategoryWithCount]:
    """Categories ordered by name; restricted employees only see their own."""
    counts = (
        select(Product.category_id, func.count(Product.id).label("product_count"))
        .group_by(Product.category_id)
        .subquery()
    )
    stmt = (
        select(Category, func.coalesce(counts.c.product_count, 0))
        .select_from(Category)
        .outerjoin(counts, counts.c.category_id == Category.id)
        .order_by(Category.name.asc())
    )
    allowed = visible_category_ids(actor)
    if allowed is not None:
        stmt = stmt.where(Category.id.in_(allowed))

    res = await db.execute(stmt)
    return [CategoryWithCount(category=c, product_count=int(n)) for c, n in res.all()]


async def get_category(db: AsyncSession, category_id: UUID) -> CategoryWithCount:
    category = await find_category(db, category_id)
    return CategoryWithCount(category=category, product_count=await _count_products(db, category_id))


async def create_category(db: AsyncSession, payload: CategoryCreate) -> CategoryWithCount:
    async with unit_of_work(db, "create_category"):
        category = Category(name=payload.name, size=payload.size, packaging=payload.packaging)
        db.add(category)
    logger.info("Created category %s (%s)", category.id, category.name)
    return CategoryWithCount(category=category, product_count=0)


async def update_category(db: AsyncSession, category_id: UUID, payload: CategoryUpdate) -> CategoryWithCount:
    async with unit_of_work(db, "update_category"):
        category = await find_category(db, category_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("name") is not None:
            category.name = data["name"]
        if "size" in data:
            category.size = data["size"]
        if "packaging" in data:
            category.packaging = data["packaging"]
        product_count = await _count_products(db, category_id)
    return CategoryWithCount(category=category, product_count=product_count)


async def delete_category(db: AsyncSession, category_id: UUID) -> None:
    async with unit_of_work(db, "delete_category"):
        category = await find_category(db, category_id)
        product_count = await _count_products(db, category_id)
        if product_count:
            raise CategoryInUseError(category_id, product_count)
        # Dropping the last assigned category would leave the employee unrestricted
        user_count = await _count_assigned_users(db, category_id)
        if user_count:
            raise CategoryAssignedError(category_id, user_count)
        await db.delete(category)
    logger.info("Deleted category %s", category_id)
