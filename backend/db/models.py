"""
Mapped models, imported together so relationship names resolve.

- Category
- Product (-> Category)
- StockMovement (-> Product, append-only)
- User (<-> Category through user_categories)
"""

from .database import Base
from .category import Category
from .product import Product
from .stock_movement import MOVEMENT_ENTRY, MOVEMENT_EXIT, StockMovement
from .users import User, user_categories

__all__ = [
    "Base",
    "Category",
    "Product",
    "StockMovement",
    "MOVEMENT_ENTRY",
    "MOVEMENT_EXIT",
    "User",
    "user_categories",
]
