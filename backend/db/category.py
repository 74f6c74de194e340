import uuid
from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from .database import Base


class Category(Base):
    """Product category. Products reference it; it owns nothing."""
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    size = Column(String, nullable=True)
    packaging = Column(String, nullable=True)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "packaging": self.packaging,
        }
