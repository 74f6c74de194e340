"""
Category-scoped authorization.

Administrators may act on every category. Employees may act only on the
categories assigned to them; an employee without assigned categories is
unrestricted.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Literal, Optional
from uuid import UUID

from core.exceptions import AdminRequiredError, PermissionDeniedError

logger = logging.getLogger(__name__)

Role = Literal["ADMIN", "EMPLOYEE"]
ROLE_ADMIN = "ADMIN"
ROLE_EMPLOYEE = "EMPLOYEE"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller: role plus the categories it may act on."""
    user_id: Optional[UUID]
    role: Role
    allowed_category_ids: FrozenSet[UUID] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def is_unrestricted(actor: Actor) -> bool:
    return actor.is_admin or not actor.allowed_category_ids


def visible_category_ids(actor: Actor) -> Optional[FrozenSet[UUID]]:
    """Categories the actor may see, or None when everything is visible."""
    if is_unrestricted(actor):
        return None
    return actor.allowed_category_ids


def can_access_category(actor: Actor, category_id: UUID) -> bool:
    if is_unrestricted(actor):
        return True
    return category_id in actor.allowed_category_ids


def check_category_access(actor: Actor, category_id: UUID) -> None:
    if not can_access_category(actor, category_id):
        logger.warning("Denied category access for user %s", actor.user_id)
        raise PermissionDeniedError()


def require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise AdminRequiredError()
