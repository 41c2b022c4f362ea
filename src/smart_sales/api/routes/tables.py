from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.crud.table import bootstrap_tables, list_tables, list_free_tables, set_table_status
from smart_sales.db.session import get_async_session
from smart_sales.exceptions import TableNotFound, InvalidTableStatus, StoreUnavailable
from smart_sales.schemas.table import TableRead, TableStatusUpdate


router = APIRouter(prefix="/tables", tags=["tables"])

@router.get("/", response_model=List[TableRead])
async def list_tables_endpoint(db: AsyncSession = Depends(get_async_session)):
    try:
        return await list_tables(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.get("/free", response_model=List[TableRead])
async def list_free_tables_endpoint(db: AsyncSession = Depends(get_async_session)):
    """
    Свободные столы для выбора при оформлении.
    """
    try:
        return await list_free_tables(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.post("/bootstrap", response_model=List[str])
async def bootstrap_tables_endpoint(db: AsyncSession = Depends(get_async_session)):
    """
    Создаёт столы по умолчанию, если их ещё нет. Возвращает id созданных.
    """
    try:
        return await bootstrap_tables(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.patch("/{table_id}/status", response_model=TableRead)
async def update_table_status_endpoint(
    table_id: str,
    payload: TableStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Ручная смена статуса стола оператором.
    Всё кроме occupied снимает привязку к заказу.
    """
    try:
        return await set_table_status(db, table_id, payload.status)
    except TableNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except InvalidTableStatus as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
