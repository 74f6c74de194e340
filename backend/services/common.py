import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import InternalServiceError, InventoryServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """
    Run one mutation as a single transaction.

    Commits when the block finishes, rolls back on any error. Storage failures
    are logged and re-raised as InternalServiceError without details.
    """
    # NOTE: the session may already be in a transaction (autobegin from an
    # earlier read in the same request), so we never call db.begin() here.
    try:
        yield db
        await db.commit()
    except InventoryServiceError:
        await db.rollback()
        raise
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("[%s] storage failure", operation)
        raise InternalServiceError()
