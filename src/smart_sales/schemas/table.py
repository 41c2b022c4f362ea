from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from smart_sales.models.table import TableStatusEnum


class TableRead(BaseModel):
    id: str
    status: TableStatusEnum
    order_id: Optional[str] = None
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class TableStatusUpdate(BaseModel):
    status: TableStatusEnum
