"""
Seed demo categories, products, an admin and an employee.

Run from backend/ (or anywhere after `pip install -e .`):
  python -m scripts.seed_demo_data

Uses the same DATABASE_URL as the API (dotenv supported by core.config).
Existing rows (matched by name/email) are left untouched.
"""

import argparse
import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from core.logging_config import setup_logging
from core.permissions import ROLE_ADMIN, ROLE_EMPLOYEE
from db.database import async_session_maker, create_db_and_tables
from db.models import Category, Product, User
from db.users import UNUSABLE_PASSWORD

logger = logging.getLogger("seed_demo_data")


@dataclass(frozen=True)
class SeedProduct:
    name: str
    category: str
    unit_price: Decimal
    unit_of_measure: str
    quantity: int
    min_qty: int
    max_qty: int


SEED_CATEGORIES: list[tuple[str, Optional[str], Optional[str]]] = [
    ("Beverages", "Medium", "Bottle"),
    ("Cleaning", "Large", "Box"),
    ("Snacks", "Small", "Bag"),
]

SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct("Mineral Water 500ml", "Beverages", Decimal("1.50"), "unit", 120, 50, 300),
    SeedProduct("Orange Juice 1L", "Beverages", Decimal("4.90"), "unit", 18, 20, 100),
    SeedProduct("Detergent 5L", "Cleaning", Decimal("32.00"), "unit", 6, 5, 40),
    SeedProduct("Paper Towels", "Cleaning", Decimal("8.75"), "pack", 2, 10, 60),
    SeedProduct("Salted Peanuts", "Snacks", Decimal("3.20"), "bag", 75, 30, 150),
]


async def get_or_create_category(session, name: str, size: Optional[str], packaging: Optional[str]) -> Category:
    res = await session.execute(select(Category).where(func.lower(Category.name) == name.lower()))
    category = res.scalar_one_or_none()
    if category:
        return category
    category = Category(name=name, size=size, packaging=packaging)
    session.add(category)
    await session.flush()
    return category


async def get_or_create_user(session, email: str, name: str, role: str, categories: list[Category]) -> User:
    res = await session.execute(
        select(User).options(selectinload(User.allowed_categories)).where(func.lower(User.email) == email.lower())
    )
    user = res.scalar_one_or_none()
    if user:
        return user
    user = User(
        email=email,
        name=name,
        role=role,
        hashed_password=UNUSABLE_PASSWORD,
        is_active=True,
        is_superuser=(role == ROLE_ADMIN),
    )
    user.allowed_categories = categories
    session.add(user)
    await session.flush()
    return user


async def seed(admin_email: str, employee_email: str) -> None:
    await create_db_and_tables()

    async with async_session_maker() as session:
        categories = {}
        for name, size, packaging in SEED_CATEGORIES:
            categories[name] = await get_or_create_category(session, name, size, packaging)

        created = 0
        for sp in SEED_PRODUCTS:
            res = await session.execute(select(Product.id).where(func.lower(Product.name) == sp.name.lower()))
            if res.scalar_one_or_none():
                continue
            session.add(
                Product(
                    name=sp.name,
                    unit_price=sp.unit_price,
                    unit_of_measure=sp.unit_of_measure,
                    quantity_in_stock=sp.quantity,
                    min_stock_quantity=sp.min_qty,
                    max_stock_quantity=sp.max_qty,
                    category_id=categories[sp.category].id,
                )
            )
            created += 1

        admin = await get_or_create_user(session, admin_email, "Admin", ROLE_ADMIN, [])
        employee = await get_or_create_user(
            session, employee_email, "Beverage Clerk", ROLE_EMPLOYEE, [categories["Beverages"]]
        )

        await session.commit()

    logger.info("Seeded %s new product(s); admin=%s employee=%s", created, admin.id, employee.id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo inventory data")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--employee-email", default="clerk@example.com")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(seed(args.admin_email, args.employee_email))


if __name__ == "__main__":
    main()
