from pydantic import BaseModel, conint, Field
from typing import Dict, List, Optional
from datetime import datetime
from decimal import Decimal

from smart_sales.models.order import OrderStatusEnum


class OrderLineRead(BaseModel):
    item_id: str
    name: str
    price: Decimal
    quantity: int
    line_total: Decimal

    @classmethod
    def from_line(cls, line):
        return cls(
            item_id=line.item_id,
            name=line.name,
            price=line.price,
            quantity=line.quantity,
            line_total=(Decimal(line.price) * line.quantity).quantize(Decimal("0.01")),
        )


class OrderRead(BaseModel):
    id: str
    customer_name: str
    phone: str
    payment_method: str
    status: OrderStatusEnum
    table_id: Optional[str] = None
    needs_reconciliation: bool = False
    timestamp: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    items: List[OrderLineRead] = []
    total_price: Decimal
    count_items: int

    @classmethod
    def from_orm_with_lines(cls, order):
        count = sum(line.quantity for line in order.lines)

        return cls(
            id=order.id,
            customer_name=order.customer_name,
            phone=order.phone,
            payment_method=order.payment_method,
            status=order.status,
            table_id=order.table_id,
            needs_reconciliation=bool(order.needs_reconciliation),
            timestamp=order.timestamp,
            closed_at=order.closed_at,
            items=[OrderLineRead.from_line(line) for line in order.lines],
            total_price=Decimal(order.total_price).quantize(Decimal("0.01")),
            count_items=count,
        )

    class Config:
        from_attributes = True


class CustomerInfo(BaseModel):
    # пустые строки допустимы: проверка идёт в сценарии оформления
    name: str = ""
    phone: str = ""
    pay_on_delivery: bool = True
    table_id: Optional[str] = None


class OrderCreate(BaseModel):
    cart: Dict[str, conint(ge=1)] = Field(..., description="item_id -> количество")
    customer: CustomerInfo

    class Config:
        extra = "forbid"


class PlacementRead(BaseModel):
    order: OrderRead
    dropped_item_ids: List[str] = []
    warnings: List[str] = []


class CompletionRead(BaseModel):
    order: OrderRead
    released_table_id: Optional[str] = None
    warnings: List[str] = []
