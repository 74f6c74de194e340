"""
Stock ledger: the only place where quantity_in_stock changes after creation.

Each entry/exit is one transaction holding two writes: a single UPDATE that
applies the delta inside the database (guarded for exits so stock never goes
below zero) and the append of the movement row. If either fails, neither is
kept.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from core.exceptions import InsufficientStockError, InvalidMovementError, ProductNotFoundError
from core.permissions import Actor, visible_category_ids
from db.models import MOVEMENT_ENTRY, MOVEMENT_EXIT, Product, StockMovement
from services.common import unit_of_work
from services.products import find_accessible_product

logger = logging.getLogger(__name__)

ABOVE_MAX_WARNING = "Warning: Stock quantity is now above the maximum defined level."
BELOW_MIN_WARNING = "Warning: Stock quantity is now below the minimum defined level."


@dataclass(frozen=True)
class MovementResult:
    id: UUID
    product_id: UUID
    product_name: str
    movement_date: datetime
    quantity: int
    type: str
    warning: Optional[str] = None

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "movement_date": self.movement_date,
            "quantity": self.quantity,
            "type": self.type,
            "warning": self.warning,
        }


def _validate_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidMovementError("Movement quantity must be an integer")
    if quantity <= 0:
        raise InvalidMovementError()
    return quantity


def _threshold_warning(movement_type: str, new_quantity: int, product: Product) -> Optional[str]:
    if movement_type == MOVEMENT_ENTRY and new_quantity > product.max_stock_quantity:
        return ABOVE_MAX_WARNING
    if movement_type == MOVEMENT_EXIT and new_quantity < product.min_stock_quantity:
        return BELOW_MIN_WARNING
    return None


async def _register(db: AsyncSession, actor: Actor, product_id: UUID, quantity: int, movement_type: str) -> MovementResult:
    quantity = _validate_quantity(quantity)

    async with unit_of_work(db, f"register_{movement_type.lower()}"):
        product = await find_accessible_product(db, actor, product_id)

        if movement_type == MOVEMENT_ENTRY:
            stmt = update(Product).where(Product.id == product_id).values(
                quantity_in_stock=Product.quantity_in_stock + quantity
            )
        else:
            stmt = (
                update(Product)
                .where(Product.id == product_id, Product.quantity_in_stock >= quantity)
                .values(quantity_in_stock=Product.quantity_in_stock - quantity)
            )
        # Read-modify-write happens in the database; the row stays locked until commit
        stmt = stmt.returning(
            Product.quantity_in_stock,
            Product.min_stock_quantity,
            Product.max_stock_quantity,
        ).execution_options(synchronize_session=False)
        row = (await db.execute(stmt)).first()

        if row is None:
            current = (
                await db.execute(select(Product.quantity_in_stock).where(Product.id == product_id))
            ).scalar_one_or_none()
            if current is None:
                raise ProductNotFoundError(product_id)
            raise InsufficientStockError(product.name, available=int(current), requested=quantity)

        new_quantity = int(row.quantity_in_stock)
        set_committed_value(product, "quantity_in_stock", new_quantity)
        set_committed_value(product, "min_stock_quantity", row.min_stock_quantity)
        set_committed_value(product, "max_stock_quantity", row.max_stock_quantity)

        movement = StockMovement(
            product_id=product.id,
            movement_date=datetime.now(timezone.utc),
            quantity=quantity,
            type=movement_type,
        )
        movement.product = product
        db.add(movement)
        await db.flush()

    warning = _threshold_warning(movement_type, new_quantity, product)
    if warning:
        logger.warning("%s for product %s (%s): quantity=%s", warning, product.id, product.name, new_quantity)
    logger.info(
        "Registered %s of %s for product %s, quantity now %s",
        movement_type, quantity, product.id, new_quantity,
    )
    return MovementResult(
        id=movement.id,
        product_id=product.id,
        product_name=product.name,
        movement_date=movement.movement_date,
        quantity=movement.quantity,
        type=movement.type,
        warning=warning,
    )


async def register_entry(db: AsyncSession, actor: Actor, product_id: UUID, quantity: int) -> MovementResult:
    """Add stock. Going above max_stock_quantity only produces a warning."""
    return await _register(db, actor, product_id, quantity, MOVEMENT_ENTRY)


async def register_exit(db: AsyncSession, actor: Actor, product_id: UUID, quantity: int) -> MovementResult:
    """Remove stock, failing with InsufficientStockError rather than going negative."""
    return await _register(db, actor, product_id, quantity, MOVEMENT_EXIT)


async def list_movements(
    db: AsyncSession,
    actor: Actor,
    product_id: Optional[UUID] = None,
    movement_type: Optional[str] = None,
) -> List[StockMovement]:
    stmt = (
        select(StockMovement)
        .join(Product, StockMovement.product_id == Product.id)
        .options(selectinload(StockMovement.product))
        .order_by(StockMovement.movement_date.desc(), StockMovement.id.desc())
    )
    allowed = visible_category_ids(actor)
    if allowed is not None:
        stmt = stmt.where(Product.category_id.in_(allowed))
    if product_id:
        stmt = stmt.where(StockMovement.product_id == product_id)
    if movement_type:
        stmt = stmt.where(StockMovement.type == movement_type)

    res = await db.execute(stmt)
    return list(res.scalars().all())
