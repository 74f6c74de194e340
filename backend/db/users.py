from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base

# Stored in hashed_password for accounts created here; matches no hasher
UNUSABLE_PASSWORD = "!"


user_categories = Table(
    "user_categories",
    Base.metadata,
    Column("user_id", GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    # A category still assigned to someone cannot go away
    Column("category_id", UUID(as_uuid=True), ForeignKey("categories.id", ondelete="RESTRICT"), primary_key=True),
)


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    name = Column(String, nullable=False)
    role = Column(Text, nullable=False, default="EMPLOYEE")  # 'ADMIN' | 'EMPLOYEE'

    # selectin: the user is loaded by fastapi-users, outside our queries
    allowed_categories = relationship("Category", secondary=user_categories, lazy="selectin")

    @property
    def to_schema(self):
        """Convert User model to schema dictionary format"""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "is_active": self.is_active,
            "is_superuser": self.is_superuser,
            "is_verified": self.is_verified,
            "category_ids": sorted((c.id for c in self.allowed_categories), key=str),
        }

