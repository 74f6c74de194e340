from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import current_actor, current_admin
from core.permissions import Actor
from db.database import get_async_session
from schemas.categories import CategoryCreate, CategoryRead, CategoryUpdate
from services import categories as category_service

router = APIRouter()


@router.get("/", response_model=List[CategoryRead])
async def list_categories(
    actor: Actor = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    items = await category_service.list_categories(db, actor)
    return [CategoryRead(**c.to_schema) for c in items]


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    created = await category_service.create_category(db, payload)
    return CategoryRead(**created.to_schema)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: UUID,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    found = await category_service.get_category(db, category_id)
    return CategoryRead(**found.to_schema)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    updated = await category_service.update_category(db, category_id, payload)
    return CategoryRead(**updated.to_schema)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    actor: Actor = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    await category_service.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
