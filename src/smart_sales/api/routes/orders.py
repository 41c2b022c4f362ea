from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.cart import Cart
from smart_sales.crud.order import place_order, complete_order, get_orders, get_order_by_id
from smart_sales.db.session import get_async_session
from smart_sales.exceptions import (
    OrderPlacementError,
    InsufficientStock,
    TableUnavailable,
    CatalogItemMissing,
    OrderNotFound,
    OrderAlreadyCompleted,
    StoreUnavailable,
)
from smart_sales.models.order import OrderStatusEnum
from smart_sales.receipt import render_receipt
from smart_sales.schemas.order import OrderCreate, OrderRead, PlacementRead, CompletionRead


router = APIRouter(prefix="/orders", tags=["orders"])

# остальные ошибки оформления - 400
PLACEMENT_CONFLICTS = (InsufficientStock, TableUnavailable, CatalogItemMissing)


@router.get("/", response_model=List[OrderRead])
async def list_orders(
    status: Optional[OrderStatusEnum] = Query(None, description="Фильтр по статусу"),
    search: Optional[str] = Query(None, description="Имя клиента или телефон"),
    limit: Optional[int] = Query(None, ge=1, description="Количество записей для вывода"),
    offset: Optional[int] = Query(None, ge=0, description="Смещение для пагинации"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает список заказов, новые первыми.
    Экран ожидающих заказов: status=pending.
    """
    try:
        orders = await get_orders(
            db, status=status.value if status else None, search=search, limit=limit, offset=offset
        )
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    return [OrderRead.from_orm_with_lines(o) for o in orders]


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: str = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает детализацию заказа по id.
    """
    try:
        order = await get_order_by_id(db, order_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_lines(order)


@router.post("/", response_model=PlacementRead, status_code=201)
async def place_order_endpoint(order_in: OrderCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Оформляет заказ из корзины.
    Возвращает созданный заказ и предупреждения, если часть корзины отброшена.
    """
    cart = Cart(order_in.cart)
    try:
        return await place_order(db, cart, order_in.customer)
    except PLACEMENT_CONFLICTS as e:
        raise HTTPException(status_code=409, detail=e.detail)
    except OrderPlacementError as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.post("/{order_id}/complete", response_model=CompletionRead)
async def complete_order_endpoint(order_id: str, db: AsyncSession = Depends(get_async_session)):
    """
    Завершает заказ и освобождает его стол.
    Если стол освободить не удалось, заказ всё равно завершён, причина в warnings.
    """
    try:
        return await complete_order(db, order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except OrderAlreadyCompleted as e:
        raise HTTPException(status_code=409, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.get("/{order_id}/receipt", response_class=HTMLResponse)
async def order_receipt(order_id: str, db: AsyncSession = Depends(get_async_session)):
    """
    Печатный чек заказа.
    """
    try:
        order = await get_order_by_id(db, order_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return HTMLResponse(render_receipt(order))
