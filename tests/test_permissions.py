"""
Category-scoped authorization rules.
"""

import uuid

import pytest

from core.exceptions import AdminRequiredError, PermissionDeniedError
from core.permissions import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    Actor,
    can_access_category,
    check_category_access,
    is_unrestricted,
    require_admin,
    visible_category_ids,
)

CAT_A = uuid.uuid4()
CAT_B = uuid.uuid4()


class TestCheckCategoryAccess:
    def test_admin_always_passes(self):
        admin = Actor(user_id=uuid.uuid4(), role=ROLE_ADMIN, allowed_category_ids=frozenset({CAT_A}))
        check_category_access(admin, CAT_B)  # should not raise

    def test_employee_without_categories_is_unrestricted(self):
        emp = Actor(user_id=uuid.uuid4(), role=ROLE_EMPLOYEE)
        check_category_access(emp, CAT_A)
        check_category_access(emp, CAT_B)
        assert is_unrestricted(emp)
        assert visible_category_ids(emp) is None

    def test_employee_allowed_category_passes(self):
        emp = Actor(user_id=uuid.uuid4(), role=ROLE_EMPLOYEE, allowed_category_ids=frozenset({CAT_A}))
        check_category_access(emp, CAT_A)
        assert can_access_category(emp, CAT_A)

    def test_employee_other_category_denied(self):
        emp = Actor(user_id=uuid.uuid4(), role=ROLE_EMPLOYEE, allowed_category_ids=frozenset({CAT_A}))
        with pytest.raises(PermissionDeniedError, match="not permitted to manage products in this category"):
            check_category_access(emp, CAT_B)

    def test_denied_message_does_not_name_categories(self):
        emp = Actor(user_id=uuid.uuid4(), role=ROLE_EMPLOYEE, allowed_category_ids=frozenset({CAT_A}))
        with pytest.raises(PermissionDeniedError) as exc:
            check_category_access(emp, CAT_B)
        assert str(CAT_A) not in str(exc.value)
        assert str(CAT_B) not in str(exc.value)


class TestVisibility:
    def test_admin_sees_everything(self):
        admin = Actor(user_id=None, role=ROLE_ADMIN)
        assert visible_category_ids(admin) is None

    def test_restricted_employee_sees_only_assigned(self):
        emp = Actor(user_id=None, role=ROLE_EMPLOYEE, allowed_category_ids=frozenset({CAT_A}))
        assert visible_category_ids(emp) == frozenset({CAT_A})
        assert not is_unrestricted(emp)


class TestRequireAdmin:
    def test_admin_passes(self):
        require_admin(Actor(user_id=None, role=ROLE_ADMIN))

    def test_unrestricted_employee_is_still_not_admin(self):
        with pytest.raises(AdminRequiredError):
            require_admin(Actor(user_id=None, role=ROLE_EMPLOYEE))
