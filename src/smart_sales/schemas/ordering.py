from pydantic import BaseModel
from typing import List

from smart_sales.schemas.inventory import InventoryItemRead
from smart_sales.schemas.table import TableRead


class OrderingScreen(BaseModel):
    """Всё, что нужно экрану покупателя при открытии."""

    category: str
    categories: List[str]
    items: List[InventoryItemRead]
    free_tables: List[TableRead]
