import csv
import io
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from smart_sales.crud.report import (
    CSV_HEADERS,
    period_start,
    get_sales_report,
    get_completed_orders,
    export_orders_csv,
    get_dashboard_summary,
)
from smart_sales.models import Order, OrderLine, OrderStatusEnum
from tests.support import DatabaseTestCase

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


class TestPeriodStart(unittest.TestCase):

    def test_periods(self):
        self.assertIsNone(period_start("all", NOW))
        self.assertEqual(period_start("week", NOW), NOW - timedelta(days=7))
        self.assertEqual(period_start("month", NOW), datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(period_start("year", NOW), datetime(2023, 3, 31, 12, 0, tzinfo=timezone.utc))

    def test_invalid_period(self):
        with self.assertRaises(ValueError):
            period_start("decade", NOW)


class TestSalesReport(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        await self.add_order("Ann", "9.00", [("Latte", "3.00", 3)], NOW - timedelta(days=1))
        await self.add_order("Bob", "5.50", [("Latte", "3.00", 1), ("Muffin", "2.50", 1)], NOW - timedelta(days=2),
                             payment_method="Other")
        await self.add_order("Ann", "2.50", [("Muffin", "2.50", 1)], NOW - timedelta(days=40))
        await self.add_order("Cid", "100.00", [("Cake", "100.00", 1)], NOW - timedelta(hours=1),
                             status=OrderStatusEnum.pending)

    async def add_order(self, name, total, lines, timestamp, status=OrderStatusEnum.completed,
                        payment_method="Pay on Delivery"):
        order = Order(
            customer_name=name,
            phone="555",
            payment_method=payment_method,
            total_price=Decimal(total),
            status=status,
            timestamp=timestamp,
            lines=[
                OrderLine(position=i, item_id=line_name.lower(), name=line_name, price=Decimal(price), quantity=qty)
                for i, (line_name, price, qty) in enumerate(lines)
            ],
        )
        self.db.add(order)
        await self.db.commit()
        return order

    async def test_report_over_all_time(self):
        report = await get_sales_report(self.db, "all", now=NOW)

        self.assertEqual(report.count_orders, 3)
        self.assertEqual(report.total_revenue, Decimal("17.00"))
        self.assertEqual(report.average_order_value, Decimal("5.67"))
        self.assertEqual(report.payment_methods, {"Pay on Delivery": 2, "Other": 1})
        self.assertEqual(
            [(c.customer_name, c.total_spent) for c in report.top_customers],
            [("Ann", Decimal("11.50")), ("Bob", Decimal("5.50"))],
        )
        self.assertEqual([(i.name, i.quantity) for i in report.top_items], [("Latte", 4), ("Muffin", 2)])
        self.assertEqual(len(report.revenue_by_day), 3)

    async def test_report_for_week_excludes_old_orders(self):
        report = await get_sales_report(self.db, "week", now=NOW)

        self.assertEqual(report.count_orders, 2)
        self.assertEqual(report.total_revenue, Decimal("14.50"))
        self.assertEqual(
            [d.day.isoformat() for d in report.revenue_by_day], ["2024-03-29", "2024-03-30"]
        )

    async def test_empty_report(self):
        report = await get_sales_report(self.db, "week", now=NOW + timedelta(days=365))
        self.assertEqual(report.count_orders, 0)
        self.assertEqual(report.total_revenue, Decimal("0.00"))
        self.assertEqual(report.average_order_value, Decimal("0.00"))

    async def test_csv_export(self):
        orders = await get_completed_orders(self.db, "week", now=NOW)
        rows = list(csv.reader(io.StringIO(export_orders_csv(orders))))

        self.assertEqual(rows[0], CSV_HEADERS)
        self.assertEqual(rows[1], ["Ann", "2024-03-30", "9.00", "Pay on Delivery", "Latte(3)"])
        self.assertEqual(rows[2], ["Bob", "2024-03-29", "5.50", "Other", "Latte(1) | Muffin(1)"])
        self.assertEqual(len(rows), 3)

    async def test_dashboard_summary(self):
        await self.add_item("Tea", "2.00", 3)
        await self.add_tables("free", "occupied")

        summary = await get_dashboard_summary(self.db)

        self.assertEqual(summary.total_orders, 4)
        self.assertEqual(summary.pending_orders, 1)
        self.assertEqual(summary.total_revenue, Decimal("17.00"))
        self.assertEqual(summary.low_stock_items, 1)
        self.assertEqual(summary.tables["occupied"], 1)
        self.assertEqual(summary.recent_orders[0].customer_name, "Cid")


if __name__ == '__main__':
    unittest.main()
