from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.crud.report import get_sales_report, get_completed_orders, export_orders_csv, get_dashboard_summary
from smart_sales.db.session import get_async_session
from smart_sales.exceptions import StoreUnavailable
from smart_sales.schemas.report import SalesReport, DashboardSummary


router = APIRouter(prefix="/reports", tags=["reports"])

Period = Literal["all", "week", "month", "year"]


@router.get("/sales", response_model=SalesReport)
async def sales_report(
    period: Period = Query("all", description="Период: all, week, month, year"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Отчёт по завершённым заказам:
    - количество, выручка, средний чек
    - выручка по дням, топ клиентов, способы оплаты, топ позиций
    """
    try:
        return await get_sales_report(db, period=period)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.get("/sales.csv")
async def sales_report_csv(
    period: Period = Query("all", description="Период: all, week, month, year"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Выгрузка завершённых заказов в CSV.
    """
    try:
        orders = await get_completed_orders(db, period=period)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    return Response(
        content=export_orders_csv(orders),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sales_report.csv"'},
    )


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(db: AsyncSession = Depends(get_async_session)):
    """
    Сводка для главного экрана администратора.
    """
    try:
        return await get_dashboard_summary(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
