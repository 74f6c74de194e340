import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .database import Base

MOVEMENT_ENTRY = "ENTRY"
MOVEMENT_EXIT = "EXIT"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockMovement(Base):
    """Append-only record of a stock entry or exit."""
    __tablename__ = "stock_movements"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_movements_quantity_positive"),
        CheckConstraint("type IN ('ENTRY', 'EXIT')", name="ck_stock_movements_type"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    movement_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    quantity = Column(Integer, nullable=False)
    type = Column(Text, nullable=False, index=True)  # 'ENTRY' | 'EXIT'

    product = relationship("Product")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product.name if self.product else None,
            "movement_date": self.movement_date,
            "quantity": self.quantity,
            "type": self.type,
        }
