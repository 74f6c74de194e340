import uuid

import pytest
from pydantic import ValidationError

from conftest import ADMIN, employee, make_category, make_product
from core.auth import actor_from_user
from core.exceptions import (
    CategoryAssignedError,
    CategoryInUseError,
    CategoryNotFoundError,
    DuplicateEmailError,
    UserNotFoundError,
)
from core.permissions import ROLE_ADMIN, ROLE_EMPLOYEE
from schemas.categories import CategoryUpdate
from schemas.users import EmployeeCreate
from services import categories as category_service
from services import products as product_service
from services import users as user_service


class TestCategories:
    async def test_list_with_product_counts(self, db):
        drinks = await make_category(db, "Drinks")
        await make_category(db, "Bakery")
        await make_product(db, drinks, name="Water")
        await make_product(db, drinks, name="Juice")

        rows = [(c.category.name, c.product_count) for c in await category_service.list_categories(db, ADMIN)]
        assert rows == [("Bakery", 0), ("Drinks", 2)]

    async def test_restricted_employee_sees_own_categories(self, db):
        drinks = await make_category(db, "Drinks")
        await make_category(db, "Bakery")
        rows = await category_service.list_categories(db, employee(drinks.id))
        assert [c.category.name for c in rows] == ["Drinks"]

    async def test_update(self, db):
        cat = await make_category(db, "Drinks")
        updated = await category_service.update_category(
            db, cat.id, CategoryUpdate(name="  Beverages ", packaging=None)
        )
        assert updated.category.name == "Beverages"
        assert updated.category.packaging is None
        assert updated.category.size == "M"

    async def test_get_missing(self, db):
        with pytest.raises(CategoryNotFoundError):
            await category_service.get_category(db, uuid.uuid4())

    async def test_delete_empty_category(self, db):
        cat = await make_category(db, "Drinks")
        cat_id = cat.id
        await category_service.delete_category(db, cat_id)
        with pytest.raises(CategoryNotFoundError):
            await category_service.get_category(db, cat_id)

    async def test_delete_refused_while_products_remain(self, db):
        cat = await make_category(db, "Drinks")
        cat_id = cat.id
        await make_product(db, cat)
        with pytest.raises(CategoryInUseError):
            await category_service.delete_category(db, cat_id)
        found = await category_service.get_category(db, cat_id)
        assert found.product_count == 1

    def test_blank_name_rejected_on_update(self):
        with pytest.raises(ValidationError):
            CategoryUpdate(name="   ")
        assert CategoryUpdate(name=None).name is None

    async def test_delete_refused_while_assigned_to_employee(self, db):
        cat_a = await make_category(db, "A")
        cat_b = await make_category(db, "B")
        cat_a_id = cat_a.id
        await make_product(db, cat_b, name="Secret")
        clerk = await user_service.create_employee(
            db, EmployeeCreate(name="Clerk", email="clerk@example.com", category_ids=[cat_a_id])
        )
        clerk_id = clerk.id

        with pytest.raises(CategoryAssignedError):
            await category_service.delete_category(db, cat_a_id)

        found = await category_service.get_category(db, cat_a_id)
        assert found.category.name == "A"
        reloaded = next(u for u in await user_service.list_users(db) if u.id == clerk_id)
        actor = actor_from_user(reloaded)
        assert actor.allowed_category_ids == frozenset({cat_a_id})
        assert [p.name for p in await product_service.list_products(db, actor)] == []

    async def test_delete_allowed_once_assignment_is_gone(self, db):
        cat = await make_category(db, "A")
        cat_id = cat.id
        clerk = await user_service.create_employee(
            db, EmployeeCreate(name="Clerk", email="clerk@example.com", category_ids=[cat_id])
        )
        await user_service.delete_user(db, clerk.id)
        await category_service.delete_category(db, cat_id)
        with pytest.raises(CategoryNotFoundError):
            await category_service.get_category(db, cat_id)


class TestUsers:
    async def test_create_employee_with_categories(self, db):
        drinks = await make_category(db, "Drinks")
        bakery = await make_category(db, "Bakery")
        user = await user_service.create_employee(
            db, EmployeeCreate(name="Ana", email="ana@example.com", category_ids=[drinks.id, bakery.id])
        )
        assert user.role == ROLE_EMPLOYEE
        assert set(user.to_schema["category_ids"]) == {drinks.id, bakery.id}

    async def test_duplicate_email_is_case_insensitive(self, db):
        await user_service.create_employee(db, EmployeeCreate(name="Ana", email="ana@example.com"))
        with pytest.raises(DuplicateEmailError):
            await user_service.create_employee(db, EmployeeCreate(name="Other", email="ANA@example.com"))

    async def test_unknown_category_rejected(self, db):
        with pytest.raises(CategoryNotFoundError):
            await user_service.create_employee(
                db, EmployeeCreate(name="Ana", email="ana@example.com", category_ids=[uuid.uuid4()])
            )
        assert await user_service.list_users(db) == []

    async def test_delete_user(self, db):
        user = await user_service.create_employee(db, EmployeeCreate(name="Ana", email="ana@example.com"))
        user_id = user.id
        await user_service.delete_user(db, user_id)
        assert await user_service.list_users(db) == []
        with pytest.raises(UserNotFoundError):
            await user_service.delete_user(db, user_id)

    async def test_my_categories(self, db):
        drinks = await make_category(db, "Drinks")
        await make_category(db, "Bakery")
        mine = await user_service.get_my_categories(db, employee(drinks.id))
        assert [c.name for c in mine] == ["Drinks"]
        assert await user_service.get_my_categories(db, employee()) == []

    async def test_ensure_admin_user_is_idempotent(self, db):
        first = await user_service.ensure_admin_user(db, "boss@example.com")
        first_id = first.id
        second = await user_service.ensure_admin_user(db, "Boss@Example.com")
        assert second.id == first_id
        assert second.role == ROLE_ADMIN
        assert len(await user_service.list_users(db)) == 1
