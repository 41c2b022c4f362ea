import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_guard(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """
    Ошибки драйвера -> StoreUnavailable, транзакция откатывается.
    Повторов нет.
    """
    try:
        yield
    except DBAPIError as e:
        logger.error("Store failure during %s: %s", action, e)
        await db.rollback()
        raise StoreUnavailable() from e
