import calendar
import csv
import io
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.config import settings
from smart_sales.crud.inventory import count_low_stock
from smart_sales.crud.order import get_orders
from smart_sales.crud.table import table_counts
from smart_sales.db.guard import store_guard
from smart_sales.models import Order, OrderLine, OrderStatusEnum
from smart_sales.schemas.order import OrderRead
from smart_sales.schemas.report import (
    SalesReport,
    DailyRevenue,
    CustomerSpending,
    ItemPopularity,
    DashboardSummary,
)

PERIODS = ("all", "week", "month", "year")
CSV_HEADERS = ["Customer Name", "Date", "Total Price", "Payment Method", "Items"]


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Начало периода отчёта: week - 7 дней, month - календарный месяц назад,
    year - год назад, all - без ограничения.
    """
    if period not in PERIODS:
        raise ValueError(f"Invalid period: {period}")
    now = now or datetime.now(timezone.utc)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return _shift_months(now, 1)
    if period == "year":
        return _shift_months(now, 12)
    return None


async def get_sales_report(
    db: AsyncSession,
    period: str = "all",
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> SalesReport:
    """
    Отчёт по завершённым заказам за период:
    - количество, выручка, средний чек
    - выручка по дням
    - топ клиентов по сумме
    - способы оплаты
    - топ позиций по количеству
    """
    start = period_start(period, now)
    limit = limit or settings.TOP_ENTRIES_LIMIT

    conditions = [Order.status == OrderStatusEnum.completed]
    if start is not None:
        conditions.append(Order.timestamp >= start)

    async with store_guard(db, "sales report"):
        totals = (
            await db.execute(
                select(
                    func.count(Order.id).label("count_orders"),
                    func.sum(Order.total_price).label("total_revenue"),
                ).where(*conditions)
            )
        ).first()

        day = func.date(Order.timestamp)
        by_day = await db.execute(
            select(day.label("day"), func.sum(Order.total_price).label("revenue"))
            .where(*conditions)
            .group_by(day)
            .order_by(day)
        )

        spent = func.sum(Order.total_price)
        customers = await db.execute(
            select(Order.customer_name, spent.label("total_spent"))
            .where(*conditions)
            .group_by(Order.customer_name)
            .order_by(desc(spent), Order.customer_name)
            .limit(limit)
        )

        payments = await db.execute(
            select(Order.payment_method, func.count(Order.id)).where(*conditions).group_by(Order.payment_method)
        )

        sold = func.sum(OrderLine.quantity)
        items = await db.execute(
            select(OrderLine.name, sold.label("quantity"))
            .join(Order, Order.id == OrderLine.order_id)
            .where(*conditions)
            .group_by(OrderLine.name)
            .order_by(desc(sold), OrderLine.name)
            .limit(limit)
        )

        count_orders = int(totals.count_orders or 0)
        total_revenue = _money(totals.total_revenue)
        average = _money(total_revenue / count_orders) if count_orders else _money(0)

        return SalesReport(
            period=period,
            count_orders=count_orders,
            total_revenue=total_revenue,
            average_order_value=average,
            revenue_by_day=[DailyRevenue(day=row.day, revenue=_money(row.revenue)) for row in by_day.all()],
            top_customers=[
                CustomerSpending(customer_name=row.customer_name, total_spent=_money(row.total_spent))
                for row in customers.all()
            ],
            payment_methods={method: int(count) for method, count in payments.all()},
            top_items=[ItemPopularity(name=row.name, quantity=int(row.quantity)) for row in items.all()],
        )


async def get_completed_orders(db: AsyncSession, period: str = "all", now: Optional[datetime] = None):
    """Завершённые заказы за период, новые первыми."""
    start = period_start(period, now)
    orders = await get_orders(db, status=OrderStatusEnum.completed.value)
    if start is None:
        return orders
    return [o for o in orders if _as_utc(o.timestamp) >= start]


def _as_utc(moment: datetime) -> datetime:
    # sqlite отдаёт naive datetime в UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def export_orders_csv(orders: Iterable[Order]) -> str:
    """
    CSV для выгрузки отчёта:
    Customer Name, Date, Total Price, Payment Method, Items ("name(qty) | ...").
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for order in orders:
        item_list = " | ".join(f"{line.name}({line.quantity})" for line in order.lines)
        writer.writerow(
            [
                order.customer_name,
                order.timestamp.date().isoformat() if order.timestamp else "",
                f"{_money(order.total_price):.2f}",
                order.payment_method,
                item_list,
            ]
        )
    return buffer.getvalue()


async def get_dashboard_summary(db: AsyncSession) -> DashboardSummary:
    """Плитки главного экрана администратора."""
    async with store_guard(db, "dashboard summary"):
        total_orders = (await db.execute(select(func.count(Order.id)))).scalar_one()
        pending_orders = (
            await db.execute(select(func.count(Order.id)).where(Order.status == OrderStatusEnum.pending))
        ).scalar_one()
        revenue = (
            await db.execute(
                select(func.sum(Order.total_price)).where(Order.status == OrderStatusEnum.completed)
            )
        ).scalar_one()

    recent = await get_orders(db, limit=settings.RECENT_ORDERS_LIMIT)

    return DashboardSummary(
        total_orders=int(total_orders or 0),
        pending_orders=int(pending_orders or 0),
        total_revenue=_money(revenue),
        low_stock_items=await count_low_stock(db, settings.LOW_STOCK_THRESHOLD),
        tables=await table_counts(db),
        recent_orders=[OrderRead.from_orm_with_lines(o) for o in recent],
    )
