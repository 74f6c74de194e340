from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import current_actor, current_admin
from core.permissions import Actor
from db.database import get_async_session
from schemas.categories import CategoryRead
from schemas.users import EmployeeCreate, UserRead
from services import users as user_service

router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Create an EMPLOYEE user scoped to the given categories (admin only)"""
    user = await user_service.create_employee(db, payload)
    return UserRead(**user.to_schema)


@router.get("/", response_model=List[UserRead])
async def list_users(
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return [UserRead(**u.to_schema) for u in await user_service.list_users(db)]


@router.get("/my-categories", response_model=List[CategoryRead])
async def get_my_categories(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return [CategoryRead(**c.to_schema) for c in await user_service.get_my_categories(db, actor)]


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    await user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
