"""
Bearer-token authentication (fastapi-users).

Tokens are issued elsewhere, so no login/register routers are mounted; the
JWT backend here only verifies them and resolves the caller. The token
subject (`sub`) is the user id.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import NotAuthenticatedError
from core.permissions import Actor, require_admin
from db.database import get_async_session
from db.models import User

logger = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.jwt_secret
    verification_token_secret = settings.jwt_secret


async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.jwt_secret,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        algorithm=settings.jwt_algorithm,
    )


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

# optional=True so a missing caller surfaces as NotAuthenticatedError, not a bare 401
_optional_active_user = fastapi_users.current_user(active=True, optional=True)


async def current_active_user(user: Optional[User] = Depends(_optional_active_user)) -> User:
    if user is None:
        logger.info("Rejected request without a valid bearer token for an active user")
        raise NotAuthenticatedError()
    return user


def actor_from_user(user: User) -> Actor:
    return Actor(
        user_id=user.id,
        role=user.role,
        allowed_category_ids=frozenset(c.id for c in user.allowed_categories),
    )


async def current_actor(user: User = Depends(current_active_user)) -> Actor:
    return actor_from_user(user)


async def current_admin(actor: Actor = Depends(current_actor)) -> Actor:
    require_admin(actor)
    return actor
