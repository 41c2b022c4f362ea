"""
Завершение заказа и освобождение стола.
"""
import unittest
from unittest.mock import AsyncMock, patch

from sqlalchemy import delete
from sqlalchemy.exc import OperationalError

import smart_sales.crud.order as order_crud
from smart_sales.cart import Cart
from smart_sales.crud.order import place_order, complete_order, get_order_by_id
from smart_sales.crud.table import set_table_status
from smart_sales.exceptions import OrderNotFound, OrderAlreadyCompleted
from smart_sales.models import DiningTable, OrderStatusEnum
from smart_sales.schemas.order import CustomerInfo
from tests.support import DatabaseTestCase


class TestCompleteOrder(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        await self.add_item("Americano", "3.00", 5, item_id="A")

    async def place(self, table_id=None):
        info = CustomerInfo(name="Ann", phone="555-0100", table_id=table_id)
        result = await place_order(self.db, Cart({"A": 1}), info)
        return result.order.id

    async def test_completes_order_and_frees_table(self):
        await self.add_tables("free", "free")
        order_id = await self.place("table1")

        result = await complete_order(self.db, order_id)

        self.assertEqual(result.order.status, OrderStatusEnum.completed)
        self.assertIsNotNone(result.order.closed_at)
        self.assertFalse(result.order.needs_reconciliation)
        self.assertEqual(result.released_table_id, "table1")
        self.assertEqual(result.warnings, [])
        self.assertEqual(await self.table_state("table1"), ("free", None))

    async def test_order_without_table_leaves_tables_alone(self):
        await self.add_tables("occupied", "reserved")
        order_id = await self.place()

        result = await complete_order(self.db, order_id)

        self.assertIsNone(result.released_table_id)
        self.assertEqual(result.warnings, [])
        self.assertEqual(await self.table_state("table1"), ("occupied", None))
        self.assertEqual(await self.table_state("table2"), ("reserved", None))

    async def test_unknown_order(self):
        with self.assertRaises(OrderNotFound):
            await complete_order(self.db, "missing")

    async def test_already_completed(self):
        order_id = await self.place()
        await complete_order(self.db, order_id)
        with self.assertRaises(OrderAlreadyCompleted):
            await complete_order(self.db, order_id)

    async def test_table_already_freed_by_operator(self):
        await self.add_tables("free")
        order_id = await self.place("table1")
        await set_table_status(self.db, "table1", "free")

        result = await complete_order(self.db, order_id)

        self.assertEqual(result.order.status, OrderStatusEnum.completed)
        self.assertIsNone(result.released_table_id)
        self.assertEqual(result.warnings, [])
        self.assertFalse(result.order.needs_reconciliation)

    async def test_table_changed_by_operator_is_flagged(self):
        await self.add_tables("free")
        order_id = await self.place("table1")
        await set_table_status(self.db, "table1", "maintenance")

        result = await complete_order(self.db, order_id)

        self.assertEqual(result.order.status, OrderStatusEnum.completed)
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("table1", result.warnings[0])
        self.assertTrue(result.order.needs_reconciliation)
        self.assertEqual(await self.table_state("table1"), ("maintenance", None))

    async def test_table_held_by_another_order_is_untouched(self):
        await self.add_tables("free")
        first = await self.place("table1")
        await set_table_status(self.db, "table1", "free")
        second = await self.place("table1")

        result = await complete_order(self.db, first)

        self.assertTrue(result.order.needs_reconciliation)
        self.assertEqual(await self.table_state("table1"), ("occupied", second))

    async def test_missing_table_is_flagged(self):
        await self.add_tables("free")
        order_id = await self.place("table1")
        await self.db.execute(delete(DiningTable).where(DiningTable.id == "table1"))
        await self.db.commit()

        result = await complete_order(self.db, order_id)

        self.assertEqual(result.order.status, OrderStatusEnum.completed)
        self.assertIn("not found", result.warnings[0])
        self.assertTrue(result.order.needs_reconciliation)

    async def test_release_failure_keeps_order_completed(self):
        await self.add_tables("free")
        order_id = await self.place("table1")
        error = OperationalError("UPDATE tables", {}, Exception("disk I/O error"))

        with patch.object(order_crud, "release_table_if_linked", AsyncMock(side_effect=error)):
            result = await complete_order(self.db, order_id)

        self.assertEqual(len(result.warnings), 1)
        self.assertIn("couldn't be released", result.warnings[0])

        stored = await get_order_by_id(self.db, order_id)
        self.assertEqual(stored.status, OrderStatusEnum.completed)
        self.assertTrue(stored.needs_reconciliation)
        self.assertEqual(await self.table_state("table1"), ("occupied", order_id))


if __name__ == '__main__':
    unittest.main()
