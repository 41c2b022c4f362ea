from pydantic import BaseModel
from typing import Dict, List
from datetime import date
from decimal import Decimal

from smart_sales.schemas.order import OrderRead


class DailyRevenue(BaseModel):
    day: date
    revenue: Decimal


class CustomerSpending(BaseModel):
    customer_name: str
    total_spent: Decimal


class ItemPopularity(BaseModel):
    name: str
    quantity: int


class SalesReport(BaseModel):
    period: str
    count_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    revenue_by_day: List[DailyRevenue] = []
    top_customers: List[CustomerSpending] = []
    payment_methods: Dict[str, int] = {}
    top_items: List[ItemPopularity] = []


class DashboardSummary(BaseModel):
    total_orders: int
    pending_orders: int
    total_revenue: Decimal
    low_stock_items: int
    tables: Dict[str, int] = {}
    recent_orders: List[OrderRead] = []
