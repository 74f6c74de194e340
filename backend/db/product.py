import uuid
from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity_in_stock >= 0", name="ck_products_quantity_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    unit_price = Column(Numeric(19, 2), nullable=False, default=0)
    unit_of_measure = Column(String, nullable=True)

    # Only the stock ledger changes this after creation/update
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    min_stock_quantity = Column(Integer, nullable=False, default=0)
    max_stock_quantity = Column(Integer, nullable=False, default=0)

    category_id = Column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # One-way; always loaded explicitly with selectinload()
    category = relationship("Category")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "unit_price": self.unit_price,
            "unit_of_measure": self.unit_of_measure,
            "quantity_in_stock": self.quantity_in_stock,
            "min_stock_quantity": self.min_stock_quantity,
            "max_stock_quantity": self.max_stock_quantity,
            "category_id": self.category_id,
            "category": {"id": self.category.id, "name": self.category.name} if self.category else None,
        }
