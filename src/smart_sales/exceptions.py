"""
Ошибки предметной области.

crud-слой поднимает их, роуты переводят в HTTPException.
"""
from typing import Optional


class SmartSalesError(Exception):
    """Базовое исключение приложения."""

    message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


# --- оформление заказа ---

class OrderPlacementError(SmartSalesError):
    """Заказ не создан, в базу ничего не записано."""


class EmptyCart(OrderPlacementError):
    message = "Your cart is empty."


class CatalogItemMissing(OrderPlacementError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item {item_id} is no longer available.")


class InsufficientStock(OrderPlacementError):
    def __init__(self, item_id: str, name: str, available: int, requested: int):
        self.item_id = item_id
        self.name = name
        self.available = available
        self.requested = requested
        super().__init__(f"Not enough stock for {name}. Only {available} available.")


class MissingCustomerInfo(OrderPlacementError):
    message = "Please fill in all required fields."


class TableRequired(OrderPlacementError):
    message = "Please select a table."


class TableUnavailable(OrderPlacementError):
    def __init__(self, table_id: str):
        self.table_id = table_id
        super().__init__(f"Table {table_id} is not free anymore. Please select another table.")


# --- поиск сущностей ---

class OrderNotFound(SmartSalesError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order with id={order_id} not found")


class OrderAlreadyCompleted(SmartSalesError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order with id={order_id} is already completed")


class ItemNotFound(SmartSalesError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Inventory item with id={item_id} not found")


class TableNotFound(SmartSalesError):
    def __init__(self, table_id: str):
        self.table_id = table_id
        super().__init__(f"Table with id={table_id} not found")


class InvalidTableStatus(SmartSalesError):
    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Invalid table status: {status}")


# --- пользователи ---

class EmailAlreadyRegistered(SmartSalesError):
    message = "Failed to register. Email is already in use."


class InvalidCredentials(SmartSalesError):
    message = "Invalid email or password. Please try again."


class UnknownRole(SmartSalesError):
    message = "Unknown user role. Please contact support."


# --- хранилище ---

class PartialWriteFailure(SmartSalesError):
    """
    Шаг после фиксации первой записи не выполнился.
    Не откатывается, возвращается клиенту как предупреждение.
    """

    def __init__(self, message: str, order_id: Optional[str] = None):
        self.order_id = order_id
        super().__init__(message)


class StoreUnavailable(SmartSalesError):
    message = "Database is unavailable. Please try again."
