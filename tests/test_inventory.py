import unittest
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from smart_sales.crud.inventory import (
    list_items,
    get_catalog,
    get_item,
    create_item,
    update_item,
    delete_item,
    count_low_stock,
)
from smart_sales.exceptions import ItemNotFound
from smart_sales.schemas.inventory import InventoryItemCreate, InventoryItemUpdate
from tests.support import DatabaseTestCase


class TestInventory(DatabaseTestCase):

    async def test_create_defaults_category(self):
        item = await create_item(self.db, InventoryItemCreate(name=" Bagel ", price=Decimal("1.20"), stock=4))
        self.assertEqual(item.name, "Bagel")
        self.assertEqual(item.category, "other")
        self.assertEqual((await get_item(self.db, item.id)).stock, 4)

    async def test_search_is_case_insensitive(self):
        await self.add_item("Iced Latte", "4.00", 3)
        await self.add_item("Tea", "2.00", 3)
        found = await list_items(self.db, search="latte")
        self.assertEqual([i.name for i in found], ["Iced Latte"])

    async def test_partial_update(self):
        item = await self.add_item("Tea", "2.00", 3, category="drinks")
        updated = await update_item(self.db, item.id, InventoryItemUpdate(stock=12))
        self.assertEqual(updated.stock, 12)
        self.assertEqual(updated.price, Decimal("2.00"))
        self.assertEqual(updated.category, "drinks")

        updated = await update_item(self.db, item.id, InventoryItemUpdate(category=""))
        self.assertEqual(updated.category, "other")

    async def test_update_unknown_item(self):
        with self.assertRaises(ItemNotFound):
            await update_item(self.db, "missing", InventoryItemUpdate(stock=1))

    async def test_delete(self):
        item = await self.add_item("Tea", "2.00", 3)
        self.assertTrue(await delete_item(self.db, item.id))
        self.assertFalse(await delete_item(self.db, item.id))
        with self.assertRaises(ItemNotFound):
            await get_item(self.db, item.id)

    async def test_negative_stock_is_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            await self.add_item("Tea", "2.00", -1)
        await self.db.rollback()
        self.assertEqual(await list_items(self.db), [])

    async def test_catalog_and_low_stock(self):
        await self.add_item("Tea", "2.00", 30, category="drinks")
        await self.add_item("Muffin", "2.50", 2, category="bakery")
        await self.add_item("Latte", "3.50", 9, category="drinks")

        catalog = await get_catalog(self.db)
        self.assertEqual(len(catalog), 3)
        self.assertEqual(catalog.categories(), ["all", "drinks", "bakery"])
        self.assertEqual(await count_low_stock(self.db, 10), 2)


if __name__ == '__main__':
    unittest.main()
