import unittest
from decimal import Decimal
from types import SimpleNamespace

from smart_sales.receipt import render_receipt


def make_order(**overrides):
    fields = dict(
        customer_name="Ann",
        phone="555-0100",
        payment_method="Pay on Delivery",
        table_id="table3",
        total_price=Decimal("8.5"),
        lines=[
            SimpleNamespace(name="Latte", price=Decimal("3.00"), quantity=2),
            SimpleNamespace(name="Muffin", price=Decimal("2.50"), quantity=1),
        ],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestReceipt(unittest.TestCase):

    def test_contains_order_details(self):
        html = render_receipt(make_order())
        self.assertIn("Ann", html)
        self.assertIn("555-0100", html)
        self.assertIn("table3", html)
        self.assertIn("Latte x 2 - $6.00", html)
        self.assertIn("Muffin x 1 - $2.50", html)
        self.assertIn("$8.50", html)
        self.assertIn("window.print()", html)

    def test_table_is_optional(self):
        html = render_receipt(make_order(table_id=None))
        self.assertNotIn("Table:", html)

    def test_escapes_customer_input(self):
        html = render_receipt(make_order(customer_name="<script>alert(1)</script>"))
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)


if __name__ == '__main__':
    unittest.main()
