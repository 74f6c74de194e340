import logging
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import CategoryNotFoundError, DuplicateEmailError, UserNotFoundError
from core.permissions import ROLE_ADMIN, ROLE_EMPLOYEE, Actor
from db.models import Category, User
from db.users import UNUSABLE_PASSWORD
from schemas.users import EmployeeCreate
from services.common import unit_of_work

logger = logging.getLogger(__name__)


async def _email_taken(db: AsyncSession, email: str) -> bool:
    res = await db.execute(select(User.id).where(func.lower(User.email) == email.lower()))
    return res.scalar_one_or_none() is not None


async def create_employee(db: AsyncSession, payload: EmployeeCreate) -> User:
    async with unit_of_work(db, "create_employee"):
        email = str(payload.email).strip()
        if await _email_taken(db, email):
            raise DuplicateEmailError(email)

        categories: List[Category] = []
        wanted = list(dict.fromkeys(payload.category_ids))
        if wanted:
            res = await db.execute(select(Category).where(Category.id.in_(wanted)))
            found = {c.id: c for c in res.scalars().all()}
            missing = [cid for cid in wanted if cid not in found]
            if missing:
                raise CategoryNotFoundError(missing[0])
            categories = [found[cid] for cid in wanted]

        user = User(
            email=email,
            name=payload.name,
            role=ROLE_EMPLOYEE,
            hashed_password=UNUSABLE_PASSWORD,
            is_active=True,
        )
        user.allowed_categories = categories
        db.add(user)
    logger.info("Created employee %s with %s category(ies)", user.id, len(categories))
    return user


async def list_users(db: AsyncSession) -> List[User]:
    res = await db.execute(
        select(User).options(selectinload(User.allowed_categories)).order_by(User.name.asc())
    )
    return list(res.scalars().all())


async def delete_user(db: AsyncSession, user_id: UUID) -> None:
    async with unit_of_work(db, "delete_user"):
        res = await db.execute(
            select(User).options(selectinload(User.allowed_categories)).where(User.id == user_id)
        )
        user = res.scalar_one_or_none()
        if not user:
            raise UserNotFoundError(user_id)
        await db.delete(user)
    logger.info("Deleted user %s", user_id)


async def get_my_categories(db: AsyncSession, actor: Actor) -> List[Category]:
    if not actor.allowed_category_ids:
        return []
    res = await db.execute(
        select(Category)
        .where(Category.id.in_(actor.allowed_category_ids))
        .order_by(Category.name.asc())
    )
    return list(res.scalars().all())


async def ensure_admin_user(db: AsyncSession, email: str, name: str = "Admin") -> User:
    """Create the initial administrator if no user has this email yet."""
    async with unit_of_work(db, "ensure_admin_user"):
        res = await db.execute(
            select(User).options(selectinload(User.allowed_categories)).where(func.lower(User.email) == email.lower())
        )
        user = res.scalar_one_or_none()
        if user is None:
            user = User(
                email=email,
                name=name,
                role=ROLE_ADMIN,
                hashed_password=UNUSABLE_PASSWORD,
                is_active=True,
                is_superuser=True,
            )
            user.allowed_categories = []
            db.add(user)
            logger.info("Created initial admin user %s", email)
    return user
