"""
Общая обвязка тестов: база sqlite в памяти на каждый тест.

Run from project root: python -m pytest tests/ -v
"""
import unittest
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from smart_sales.db.base import Base
from smart_sales.models import InventoryItem, DiningTable, TableStatusEnum, Order

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Чистая схема и открытая сессия self.db в каждом тесте."""

    async def asyncSetUp(self):
        self.engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.session_factory = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self.db = self.session_factory()

    async def asyncTearDown(self):
        await self.db.close()
        await self.engine.dispose()

    async def add_item(self, name, price, stock, category="other", item_id=None):
        item = InventoryItem(name=name, price=Decimal(str(price)), stock=stock, category=category)
        if item_id:
            item.id = item_id
        self.db.add(item)
        await self.db.commit()
        return item

    async def add_tables(self, *statuses, prefix="table"):
        """add_tables("free", "occupied") -> table1 free, table2 occupied."""
        for index, status in enumerate(statuses, start=1):
            self.db.add(DiningTable(id=f"{prefix}{index}", status=TableStatusEnum(status)))
        await self.db.commit()

    async def stock_of(self, item_id):
        result = await self.db.execute(select(InventoryItem.stock).where(InventoryItem.id == item_id))
        return result.scalar_one_or_none()

    async def table_state(self, table_id):
        result = await self.db.execute(
            select(DiningTable.status, DiningTable.order_id).where(DiningTable.id == table_id)
        )
        row = result.first()
        return (TableStatusEnum(row.status).value, row.order_id) if row else None

    async def count_orders(self):
        result = await self.db.execute(select(Order.id))
        return len(result.scalars().all())
