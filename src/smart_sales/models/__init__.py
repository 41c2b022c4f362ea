from .user import User, RoleEnum
from .inventory_item import InventoryItem, DEFAULT_CATEGORY
from .order import Order, OrderStatusEnum, PaymentMethod
from .order_item import OrderLine
from .table import DiningTable, TableStatusEnum

__all__ = [
    "User",
    "RoleEnum",
    "InventoryItem",
    "DEFAULT_CATEGORY",
    "Order",
    "OrderStatusEnum",
    "PaymentMethod",
    "OrderLine",
    "DiningTable",
    "TableStatusEnum",
]
