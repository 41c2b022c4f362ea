import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update, func, or_
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smart_sales.cart import Cart
from smart_sales.config import settings
from smart_sales.crud.inventory import decrement_stock_if_unchanged, read_stock
from smart_sales.crud.table import list_free_tables, occupy_table_if_free, release_table_if_linked
from smart_sales.db.guard import store_guard
from smart_sales.exceptions import (
    SmartSalesError,
    EmptyCart,
    CatalogItemMissing,
    InsufficientStock,
    MissingCustomerInfo,
    TableRequired,
    TableUnavailable,
    OrderNotFound,
    OrderAlreadyCompleted,
    PartialWriteFailure,
    StoreUnavailable,
)
from smart_sales.models import (
    InventoryItem,
    Order,
    OrderLine,
    OrderStatusEnum,
    PaymentMethod,
    DiningTable,
    TableStatusEnum,
)
from smart_sales.schemas.order import CustomerInfo, OrderRead, PlacementRead, CompletionRead

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


async def get_orders(
    db: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Order]:
    """
    Возвращает список заказов с опциональной фильтрацией по статусу.
    search - подстрока имени клиента (без учёта регистра) или телефона.
    Сортируем по timestamp (новые первыми).
    """
    stmt = (
        select(Order)
        .options(selectinload(Order.lines))
        .order_by(Order.timestamp.desc(), Order.id)
        .execution_options(populate_existing=True)
    )

    if status:
        stmt = stmt.where(Order.status == status)
    if search:
        stmt = stmt.where(
            or_(
                func.lower(Order.customer_name).contains(search.lower()),
                Order.phone.contains(search),
            )
        )
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    async with store_guard(db, "list orders"):
        result = await db.execute(stmt)
        return result.scalars().unique().all()


async def get_order_by_id(db: AsyncSession, order_id: str) -> Optional[Order]:
    """
    Возвращает заказ по ID с подгруженными позициями.
    Предотвращает MissingGreenlet при сериализации.
    """
    stmt = (
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.lines))
        .execution_options(populate_existing=True)
    )
    async with store_guard(db, "read order"):
        result = await db.execute(stmt)
        return result.scalars().unique().first()


async def _resolve_cart(db: AsyncSession, cart: Cart, drop_missing: bool):
    """
    Шаг 1: находим позиции и сверяем количество с остатком.
    До любой записи.
    """
    resolved = []
    dropped = []
    for item_id, quantity in cart.items():
        item = await db.get(InventoryItem, item_id, populate_existing=True)
        if item is None:
            if not drop_missing:
                raise CatalogItemMissing(item_id)
            logger.warning("Cart item %s is no longer in the catalog, dropped from the order", item_id)
            dropped.append(item_id)
            continue
        if quantity > item.stock:
            raise InsufficientStock(item.id, item.name, item.stock, quantity)
        resolved.append((item, quantity))
    return resolved, dropped


async def _decrement_stock(db: AsyncSession, item: InventoryItem, quantity: int, retries: int) -> int:
    """
    Условное списание с повтором при конфликте.
    Между попытками перечитываем остаток и заново проверяем количество.
    """
    expected = item.stock
    for attempt in range(retries + 1):
        if await decrement_stock_if_unchanged(db, item.id, expected, quantity):
            return expected - quantity

        current = await read_stock(db, item.id)
        if current is None:
            raise CatalogItemMissing(item.id)
        if quantity > current:
            raise InsufficientStock(item.id, item.name, current, quantity)
        logger.info(
            "Stock of %s changed concurrently (%s -> %s), retry %s", item.id, expected, current, attempt + 1
        )
        expected = current

    logger.error("Gave up updating stock of %s after %s retries", item.id, retries)
    raise StoreUnavailable(f"Stock of {item.name} keeps changing. Please try again.")


async def place_order(
    db: AsyncSession,
    cart: Cart,
    customer: CustomerInfo,
    drop_missing_items: Optional[bool] = None,
) -> PlacementRead:
    """
    Оформление заказа из корзины.

    Порядок проверок: остатки -> данные клиента -> выбор стола.
    Запись заказа, списание остатков и занятие стола идут одной транзакцией,
    остаток и статус стола меняются условным UPDATE, поэтому двойной
    продажи и двойного бронирования стола нет. При ошибке откатывается всё.
    После успеха корзина очищается.
    """
    if cart.is_empty:
        raise EmptyCart()

    drop_missing = settings.DROP_MISSING_CART_ITEMS if drop_missing_items is None else drop_missing_items
    table_id = (customer.table_id or "").strip() or None

    try:
        async with store_guard(db, "place order"):
            # 1. остатки
            resolved, dropped = await _resolve_cart(db, cart, drop_missing)
            if not resolved:
                raise EmptyCart("None of the items in your cart are available anymore.")

            # 2. сумма по снимку цен
            total = sum((Decimal(item.price) * quantity for item, quantity in resolved), Decimal("0"))

            # 3. данные клиента
            name = customer.name.strip()
            phone = customer.phone.strip()
            if not name or not phone:
                raise MissingCustomerInfo()

            # 4. стол обязателен, если есть свободные
            free_ids = [t.id for t in await list_free_tables(db)]
            if free_ids and not table_id:
                raise TableRequired()
            if table_id and table_id not in free_ids:
                raise TableUnavailable(table_id)

            # 5-6. заказ
            order = Order(
                customer_name=name,
                phone=phone,
                payment_method=(
                    PaymentMethod.pay_on_delivery.value if customer.pay_on_delivery else PaymentMethod.other.value
                ),
                total_price=total.quantize(CENT),
                status=OrderStatusEnum.pending,
                table_id=table_id,
                lines=[
                    OrderLine(
                        position=position,
                        item_id=item.id,
                        name=item.name,
                        price=item.price,
                        quantity=quantity,
                    )
                    for position, (item, quantity) in enumerate(resolved)
                ],
            )
            db.add(order)
            await db.flush()

            # 7. списание
            retries = settings.STOCK_UPDATE_RETRIES
            for item, quantity in resolved:
                left = await _decrement_stock(db, item, quantity, retries)
                logger.debug("Stock of %s: %s left", item.id, left)

            # 8. стол
            if table_id and not await occupy_table_if_free(db, table_id, order.id):
                raise TableUnavailable(table_id)

            await db.commit()
    except SmartSalesError:
        await db.rollback()
        raise

    order_id = order.id
    logger.info(
        "Order %s placed: %s lines, total %s, table %s", order_id, len(resolved), order.total_price, table_id
    )

    # 9. корзина больше не нужна
    cart.clear()

    created = await get_order_by_id(db, order_id)
    warnings = []
    if dropped:
        warnings.append(f"{len(dropped)} item(s) are no longer sold and were removed from your order.")

    return PlacementRead(
        order=OrderRead.from_orm_with_lines(created),
        dropped_item_ids=dropped,
        warnings=warnings,
    )


async def _release_table(db: AsyncSession, order_id: str, table_id: str) -> Optional[str]:
    """
    Освобождает стол заказа. Заказ к этому моменту уже завершён.
    PartialWriteFailure, если стол освободить не удалось.
    """
    try:
        if await release_table_if_linked(db, table_id, order_id):
            await db.commit()
            logger.info("Table %s marked as free", table_id)
            return table_id
        table = await db.get(DiningTable, table_id, populate_existing=True)
        found = table is not None
        status, linked_order_id = (table.status, table.order_id) if found else (None, None)
        await db.commit()
    except DBAPIError as e:
        await db.rollback()
        logger.error("Error updating table status for %s: %s", table_id, e)
        raise PartialWriteFailure(f"Order completed but table {table_id} couldn't be released.", order_id) from e

    if not found:
        raise PartialWriteFailure(f"Order completed but table {table_id} was not found.", order_id)
    if status == TableStatusEnum.free and linked_order_id is None:
        # оператор уже освободил стол вручную
        logger.info("Table %s is already free", table_id)
        return None
    raise PartialWriteFailure(
        f"Order completed but table {table_id} is held by another order or was changed manually.", order_id
    )


async def _flag_for_reconciliation(db: AsyncSession, order_id: str) -> Optional[str]:
    """Помечает заказ для ручной сверки. Возвращает текст ошибки, если и это не вышло."""
    try:
        await db.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(needs_reconciliation=True)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except DBAPIError as e:
        await db.rollback()
        logger.error("Could not flag order %s for reconciliation: %s", order_id, e)
        return f"Order {order_id} could not be flagged for reconciliation."
    return None


async def complete_order(db: AsyncSession, order_id: str) -> CompletionRead:
    """
    pending -> completed и освобождение стола.
    Если стол освободить не удалось, заказ остаётся завершённым,
    помечается needs_reconciliation, а причина уходит в warnings.
    """
    try:
        async with store_guard(db, "complete order"):
            order = await db.get(Order, order_id, populate_existing=True)
            if not order:
                raise OrderNotFound(order_id)

            result = await db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == OrderStatusEnum.pending)
                .values(status=OrderStatusEnum.completed, closed_at=func.now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise OrderAlreadyCompleted(order_id)
            await db.commit()
    except SmartSalesError:
        await db.rollback()
        raise

    table_id = order.table_id
    logger.info("Order %s completed", order_id)

    warnings = []
    released = None
    if table_id:
        try:
            released = await _release_table(db, order_id, table_id)
        except PartialWriteFailure as e:
            logger.warning("Order %s needs reconciliation: %s", order_id, e)
            warnings.append(str(e))
            flag_error = await _flag_for_reconciliation(db, order_id)
            if flag_error:
                warnings.append(flag_error)

    completed = await get_order_by_id(db, order_id)
    return CompletionRead(
        order=OrderRead.from_orm_with_lines(completed),
        released_table_id=released,
        warnings=warnings,
    )
