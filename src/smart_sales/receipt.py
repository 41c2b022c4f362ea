"""Печатный чек заказа (HTML, открывается в новом окне и уходит на печать)."""
from decimal import Decimal

from jinja2 import Environment, select_autoescape

RECEIPT_TEMPLATE = """\
<html>
  <head>
    <title>Receipt</title>
    <style>
      body { font-family: Arial, sans-serif; background-color: #f4f4f4; padding: 20px; }
      h1, h2 { color: #333; }
      p { margin: 5px 0; }
      ul { list-style-type: none; padding: 0; }
      li { background-color: #fff; margin: 5px 0; padding: 10px; border-radius: 5px; }
    </style>
  </head>
  <body onload="window.print()">
    <h1>Order Receipt</h1>
    <p><strong>Customer Name:</strong> {{ order.customer_name }}</p>
    <p><strong>Phone Number:</strong> {{ order.phone }}</p>
    {% if order.table_id %}<p><strong>Table:</strong> {{ order.table_id }}</p>{% endif %}
    <p><strong>Payment Method:</strong> {{ order.payment_method }}</p>
    <h2>Order Details:</h2>
    <ul>
      {% for line in lines %}<li>{{ line.name }} x {{ line.quantity }} - ${{ line.total|money }}</li>
      {% endfor %}
    </ul>
    <p><strong>Total Price:</strong> ${{ order.total_price|money }}</p>
  </body>
</html>
"""


def _money(value) -> str:
    return f"{Decimal(str(value)).quantize(Decimal('0.01'))}"


_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_env.filters["money"] = _money
_template = _env.from_string(RECEIPT_TEMPLATE)


def render_receipt(order) -> str:
    """
    order - Order из базы или OrderRead.
    Позиции берутся из снимка заказа, каталог не нужен.
    """
    lines = getattr(order, "lines", None)
    if lines is None:
        lines = order.items
    rows = [
        {"name": line.name, "quantity": line.quantity, "total": Decimal(str(line.price)) * line.quantity}
        for line in lines
    ]
    return _template.render(order=order, lines=rows)
