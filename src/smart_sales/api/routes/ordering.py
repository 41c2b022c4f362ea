from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smart_sales.catalog import ALL_CATEGORIES
from smart_sales.crud.inventory import get_catalog
from smart_sales.crud.table import bootstrap_tables, list_free_tables
from smart_sales.db.session import get_async_session
from smart_sales.exceptions import StoreUnavailable
from smart_sales.schemas.inventory import InventoryItemRead
from smart_sales.schemas.ordering import OrderingScreen
from smart_sales.schemas.table import TableRead


router = APIRouter(prefix="/ordering", tags=["ordering"])

@router.get("", response_model=OrderingScreen)
async def ordering_screen(
    category: str = Query(ALL_CATEGORIES, description="Категория меню"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Экран покупателя: при первом открытии создаёт столы,
    отдаёт меню (с фильтром по категории), категории и свободные столы.
    """
    try:
        await bootstrap_tables(db)
        catalog = await get_catalog(db)
        free_tables = await list_free_tables(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.detail)

    return OrderingScreen(
        category=category,
        categories=catalog.categories(),
        items=[InventoryItemRead.model_validate(i) for i in catalog.filter(category)],
        free_tables=[TableRead.model_validate(t) for t in free_tables],
    )
