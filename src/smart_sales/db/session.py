import logging
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from smart_sales.config import settings

logger = logging.getLogger(__name__)

# Асинхронный движок
engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, future=True)

# Фабрика сессий
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Зависимость для FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Использовать в Depends(get_async_session)
    Пример: async def endpoint(db: AsyncSession = Depends(get_async_session))
    """
    async with AsyncSessionLocal() as session:
        yield session


async def create_all(bind: Optional[AsyncEngine] = None) -> bool:
    """
    Создаёт недостающие таблицы при локальном запуске на sqlite.
    Postgres поднимается только через `alembic upgrade head`.
    Возвращает True, если схема создавалась.
    """
    from smart_sales.db.base import Base
    import smart_sales.models  # noqa: F401  регистрируем модели в metadata

    bind = bind or engine
    if bind.dialect.name != "sqlite":
        return False

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Local sqlite schema is ready")
    return True
