from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from loguru import logger
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orders_service.core.clients import ProductLookupClient
from orders_service.core.config import settings
from orders_service.core.errors import (
    EmptyOrderError,
    OrderNotFoundError,
    OrderTotalTooLargeError,
    PersistenceFailedError,
    ProductUnavailableError,
)
from orders_service.core.metrics import ORDERS_SERVICE_OPERATIONS_TOTAL
from orders_service.crud.orders import (
    delete_order_from_db,
    get_all_orders_from_db,
    get_order_from_db,
    get_orders_by_customer_email_from_db,
    get_orders_by_status_from_db,
    save_order_in_db,
)
from orders_service.models.order import MAX_MONEY_AMOUNT, Order, OrderStatus
from orders_service.models.order_item import OrderItem
from orders_service.schemas.order import OrderCreate, OrderUpdate
from orders_service.schemas.product import ProductSnapshot


def _count(operation: str, status: str) -> None:
    ORDERS_SERVICE_OPERATIONS_TOTAL.labels(
        service=settings.SERVICE_NAME,
        operation=operation,
        status=status,
    ).inc()


def _to_money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


_email_adapter = TypeAdapter(EmailStr)


def _normalize_email(email: str) -> str:
    """Bring a lookup address to the form ``EmailStr`` stored it in (domain lowercased)."""
    try:
        return _email_adapter.validate_python(email)
    except ValidationError:
        # такой адрес не мог пройти валидацию при создании, ищем как есть
        return email


async def create_order(
    session: AsyncSession,
    draft: OrderCreate,
    product_client: ProductLookupClient,
) -> Order:
    """Validate every referenced product, build the aggregate and persist it.

    Checks run in a fixed order and stop at the first failure:

    1. the draft has items, otherwise ``EmptyOrderError`` with no remote call;
    2. each item's product is looked up in item order, the first failure
       raises ``ProductUnavailableError`` and nothing is written;
    3. items are attached to the order and the totals computed;
    4. order and items are committed together, a storage error is rolled
       back and raised as ``PersistenceFailedError``.
    """
    _count("create", "attempt")
    logger.info(
        "Service create_order called for customer_email='{email}' with {items_count} items",
        email=draft.customer_email,
        items_count=len(draft.items),
    )
    if not draft.items:
        logger.warning(
            "Service create_order called without items for customer_email='{email}'",
            email=draft.customer_email,
        )
        _count("create", "no_items")
        raise EmptyOrderError()

    snapshots: list[ProductSnapshot] = []
    for item_in in draft.items:
        try:
            snapshots.append(await product_client.validate_exists(item_in.product_id))
        except ProductUnavailableError:
            logger.error(
                "Service create_order aborted: product '{product_id}' unavailable",
                product_id=str(item_in.product_id),
            )
            _count("create", "product_unavailable")
            raise

    order = Order(
        customer_name=draft.customer_name,
        customer_email=str(draft.customer_email),
        shipping_address=draft.shipping_address,
        status=draft.status.value,
    )
    for item_in, snapshot in zip(draft.items, snapshots):
        unit_price = item_in.unit_price if item_in.unit_price is not None else snapshot.price
        order.add_item(
            OrderItem(
                product_id=item_in.product_id,
                quantity=item_in.quantity,
                unit_price=_to_money(unit_price),
            )
        )
        logger.debug(
            "Service create_order added item. product_id='{product_id}', qty={qty}, unit_price={unit_price}",
            product_id=str(item_in.product_id),
            qty=item_in.quantity,
            unit_price=str(unit_price),
        )

    order.calculate_total_price()
    logger.info(
        "Service create_order calculated total_price={total_price}",
        total_price=str(order.total_price),
    )
    if order.total_price > MAX_MONEY_AMOUNT:
        logger.warning(
            "Service create_order rejected: total_price={total_price} exceeds {limit}",
            total_price=str(order.total_price),
            limit=str(MAX_MONEY_AMOUNT),
        )
        _count("create", "total_too_large")
        raise OrderTotalTooLargeError(order.total_price, MAX_MONEY_AMOUNT)

    try:
        await save_order_in_db(order, session)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Service create_order failed to persist order")
        _count("create", "persistence_failed")
        raise PersistenceFailedError("Order could not be persisted") from e

    _count("create", "success")
    return order


async def get_order(session: AsyncSession, order_id: UUID) -> Order:
    order = await get_order_from_db(order_id, session)
    if order is None:
        logger.warning(
            "Service get_order: order not found. order_id='{order_id}'",
            order_id=str(order_id),
        )
        raise OrderNotFoundError(order_id)
    return order


async def get_all_orders(session: AsyncSession) -> list[Order]:
    return await get_all_orders_from_db(session)


async def get_orders_by_customer_email(session: AsyncSession, email: str) -> list[Order]:
    return await get_orders_by_customer_email_from_db(_normalize_email(email), session)


async def get_orders_by_status(session: AsyncSession, status: OrderStatus) -> list[Order]:
    return await get_orders_by_status_from_db(status, session)


async def update_order(session: AsyncSession, order_id: UUID, data: OrderUpdate) -> Order:
    """Overwrite customer fields and status. Items and totals stay as they are."""
    _count("update", "attempt")
    logger.info(
        "Service update_order called. order_id='{order_id}', new_status='{status}'",
        order_id=str(order_id),
        status=data.status.value,
    )
    order = await get_order(session, order_id)

    # переход статуса не проверяется: любой статус можно записать
    order.customer_name = data.customer_name
    order.customer_email = str(data.customer_email)
    order.shipping_address = data.shipping_address
    order.status = data.status.value

    await session.commit()
    logger.info(
        "Service update_order updated order. order_id='{order_id}'",
        order_id=str(order_id),
    )
    _count("update", "success")
    return order


async def delete_order(session: AsyncSession, order_id: UUID) -> None:
    _count("delete", "attempt")
    logger.info(
        "Service delete_order called. order_id='{order_id}'",
        order_id=str(order_id),
    )
    order = await get_order(session, order_id)
    await delete_order_from_db(order, session)
    _count("delete", "success")
