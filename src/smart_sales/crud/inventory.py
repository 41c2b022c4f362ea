import logging
from typing import List, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.catalog import Catalog
from smart_sales.db.guard import store_guard
from smart_sales.exceptions import ItemNotFound
from smart_sales.models import InventoryItem, DEFAULT_CATEGORY
from smart_sales.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


async def list_items(db: AsyncSession, search: Optional[str] = None) -> List[InventoryItem]:
    """
    Возвращает позиции склада, по имени.
    search - подстрока имени без учёта регистра.
    """
    stmt = select(InventoryItem).order_by(InventoryItem.name, InventoryItem.id)
    if search:
        stmt = stmt.where(func.lower(InventoryItem.name).contains(search.lower()))

    async with store_guard(db, "list inventory"):
        result = await db.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().all()


async def get_catalog(db: AsyncSession) -> Catalog:
    """Читает весь inventory для экрана заказа."""
    return Catalog(await list_items(db))


async def get_item(db: AsyncSession, item_id: str) -> InventoryItem:
    async with store_guard(db, "read inventory item"):
        item = await db.get(InventoryItem, item_id, populate_existing=True)
    if not item:
        raise ItemNotFound(item_id)
    return item


async def create_item(db: AsyncSession, item_in: InventoryItemCreate) -> InventoryItem:
    item = InventoryItem(
        name=item_in.name.strip(),
        price=item_in.price,
        stock=item_in.stock,
        category=(item_in.category or "").strip() or DEFAULT_CATEGORY,
        image_file_name=item_in.image_file_name,
    )
    async with store_guard(db, "create inventory item"):
        db.add(item)
        await db.commit()
        await db.refresh(item)

    logger.info("Inventory item %s (%s) added with stock %s", item.id, item.name, item.stock)
    return item


async def update_item(db: AsyncSession, item_id: str, item_in: InventoryItemUpdate) -> InventoryItem:
    """Частичное обновление позиции."""
    item = await get_item(db, item_id)

    update_data = item_in.model_dump(exclude_unset=True)
    if "category" in update_data:
        update_data["category"] = (update_data["category"] or "").strip() or DEFAULT_CATEGORY

    for key, value in update_data.items():
        setattr(item, key, value)

    async with store_guard(db, "update inventory item"):
        await db.commit()
        await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, item_id: str) -> bool:
    """
    Удаляет позицию.
    Снимки в уже созданных заказах не трогаем.
    """
    async with store_guard(db, "delete inventory item"):
        result = await db.execute(
            delete(InventoryItem)
            .where(InventoryItem.id == item_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    if result.rowcount:
        logger.info("Inventory item %s deleted", item_id)
    return bool(result.rowcount)


async def read_stock(db: AsyncSession, item_id: str) -> Optional[int]:
    """Текущий остаток прямо из базы, мимо identity map."""
    result = await db.execute(select(InventoryItem.stock).where(InventoryItem.id == item_id))
    return result.scalar_one_or_none()


async def decrement_stock_if_unchanged(
    db: AsyncSession, item_id: str, expected: int, quantity: int
) -> bool:
    """
    Условное списание: срабатывает, только если остаток всё ещё expected.
    False - кто-то успел изменить запись раньше.
    """
    result = await db.execute(
        update(InventoryItem)
        .where(InventoryItem.id == item_id, InventoryItem.stock == expected)
        .values(stock=expected - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def count_low_stock(db: AsyncSession, threshold: int) -> int:
    async with store_guard(db, "count low stock"):
        result = await db.execute(
            select(func.count(InventoryItem.id)).where(InventoryItem.stock < threshold)
        )
    return int(result.scalar_one() or 0)
