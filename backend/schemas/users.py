# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base user schema; credentials are handled by the auth service

from pydantic import BaseModel, EmailStr, field_validator
from uuid import UUID
from fastapi_users import schemas
from typing import List, Literal


class UserRead(schemas.BaseUser[UUID]):
    name: str
    role: Literal["ADMIN", "EMPLOYEE"]
    category_ids: List[UUID] = []


class EmployeeCreate(BaseModel):
    name: str
    email: EmailStr
    category_ids: List[UUID] = []

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v
