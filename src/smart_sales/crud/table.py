import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.config import settings
from smart_sales.db.guard import store_guard
from smart_sales.exceptions import TableNotFound, InvalidTableStatus
from smart_sales.models import DiningTable, TableStatusEnum

logger = logging.getLogger(__name__)


async def bootstrap_tables(db: AsyncSession, table_ids: Optional[Sequence[str]] = None) -> List[str]:
    """
    Создаёт столы по умолчанию, если коллекция пустая.
    Если есть хотя бы один стол - ничего не делает, даже если набор неполный.
    Возвращает id созданных столов.
    """
    table_ids = list(table_ids if table_ids is not None else settings.DEFAULT_TABLE_IDS)

    async with store_guard(db, "bootstrap tables"):
        result = await db.execute(select(func.count(DiningTable.id)))
        if result.scalar_one():
            return []

        logger.info("No tables found. Creating default tables...")
        # вставка по фиксированному id: повторный запуск не дублирует
        existing = await db.execute(select(DiningTable.id).where(DiningTable.id.in_(table_ids)))
        taken = set(existing.scalars().all())
        created = []
        for table_id in table_ids:
            if table_id in taken:
                continue
            db.add(DiningTable(id=table_id, status=TableStatusEnum.free, order_id=None))
            created.append(table_id)
        try:
            await db.commit()
        except IntegrityError:
            # параллельный запуск успел создать столы первым
            await db.rollback()
            logger.info("Tables were created concurrently, nothing to do")
            return []

    for table_id in created:
        logger.info("Created table: %s", table_id)
    return created


async def list_tables(db: AsyncSession) -> List[DiningTable]:
    async with store_guard(db, "list tables"):
        result = await db.execute(
            select(DiningTable).order_by(DiningTable.id).execution_options(populate_existing=True)
        )
        return result.scalars().all()


async def list_free_tables(db: AsyncSession) -> List[DiningTable]:
    """Фильтрация на стороне клиента, как на экране заказа."""
    tables = await list_tables(db)
    return [t for t in tables if t.status == TableStatusEnum.free]


async def get_table(db: AsyncSession, table_id: str) -> DiningTable:
    async with store_guard(db, "read table"):
        table = await db.get(DiningTable, table_id, populate_existing=True)
    if not table:
        raise TableNotFound(table_id)
    return table


async def occupy_table_if_free(db: AsyncSession, table_id: str, order_id: str) -> bool:
    """free -> occupied с привязкой к заказу. False, если стол уже не свободен."""
    result = await db.execute(
        update(DiningTable)
        .where(DiningTable.id == table_id, DiningTable.status == TableStatusEnum.free)
        .values(status=TableStatusEnum.occupied, order_id=order_id, timestamp=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def release_table_if_linked(db: AsyncSession, table_id: str, order_id: str) -> bool:
    """occupied -> free, только если стол держит именно этот заказ."""
    result = await db.execute(
        update(DiningTable)
        .where(DiningTable.id == table_id, DiningTable.order_id == order_id)
        .values(status=TableStatusEnum.free, order_id=None, timestamp=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def set_table_status(db: AsyncSession, table_id: str, status) -> DiningTable:
    """
    Ручная смена статуса оператором.
    Любой статус кроме occupied снимает привязку к заказу.
    Ручной occupied привязку не меняет и новую не создаёт.
    """
    try:
        status = TableStatusEnum(status)
    except ValueError:
        raise InvalidTableStatus(str(status))

    table = await get_table(db, table_id)
    previous_order_id = table.order_id

    values = {"status": status, "timestamp": func.now()}
    if status != TableStatusEnum.occupied:
        values["order_id"] = None

    async with store_guard(db, "update table status"):
        await db.execute(
            update(DiningTable)
            .where(DiningTable.id == table_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    if previous_order_id and status != TableStatusEnum.occupied:
        logger.warning(
            "Table %s manually set to %s, unlinked from order %s", table_id, status.value, previous_order_id
        )
    else:
        logger.info("Table %s manually set to %s", table_id, status.value)

    return await get_table(db, table_id)


async def table_counts(db: AsyncSession) -> Dict[str, int]:
    """Количество столов в каждом статусе, включая нулевые."""
    counts = {s.value: 0 for s in TableStatusEnum}
    async with store_guard(db, "count tables"):
        result = await db.execute(
            select(DiningTable.status, func.count(DiningTable.id)).group_by(DiningTable.status)
        )
        for status, count in result.all():
            counts[TableStatusEnum(status).value] = int(count)
    return counts
