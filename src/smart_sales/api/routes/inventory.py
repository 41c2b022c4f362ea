from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.crud.inventory import list_items, get_item, get_catalog, create_item, update_item, delete_item
from smart_sales.db.session import get_async_session
from smart_sales.exceptions import ItemNotFound, StoreUnavailable
from smart_sales.schemas.inventory import InventoryItemCreate, InventoryItemUpdate, InventoryItemRead


router = APIRouter(prefix="/inventory", tags=["inventory"])

@router.get("/", response_model=List[InventoryItemRead])
async def list_inventory(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает все позиции склада.
    """
    try:
        return await list_items(db, search=search)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.get("/categories", response_model=List[str])
async def list_categories(db: AsyncSession = Depends(get_async_session)):
    """
    Категории каталога, первой идёт "all".
    """
    try:
        catalog = await get_catalog(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    return catalog.categories()


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_inventory_item(
    item_id: str = Path(..., description="ID позиции"),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await get_item(db, item_id)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.post("/", response_model=InventoryItemRead, status_code=201)
async def create_inventory_item(item_in: InventoryItemCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Добавляет позицию (экран добавления товара).
    """
    try:
        return await create_item(db, item_in)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def patch_inventory_item(
    item_id: str,
    item_in: InventoryItemUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Частичное обновление позиции.
    Поддерживаемые поля: name, price, stock, category, image_file_name.
    """
    try:
        return await update_item(db, item_id, item_in)
    except ItemNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)


@router.delete("/{item_id}", status_code=204)
async def remove_inventory_item(item_id: str, db: AsyncSession = Depends(get_async_session)):
    """
    Удаляет позицию.
    """
    try:
        deleted = await delete_item(db, item_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)
    if not deleted:
        raise HTTPException(status_code=404, detail="Inventory item not found")
