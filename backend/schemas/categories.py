from pydantic import BaseModel, field_validator
from typing import Optional
from uuid import UUID


class CategoryRead(BaseModel):
    id: UUID
    name: str
    size: Optional[str] = None
    packaging: Optional[str] = None
    product_count: Optional[int] = None


class CategoryCreate(BaseModel):
    name: str
    size: Optional[str] = None
    packaging: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    size: Optional[str] = None
    packaging: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v
