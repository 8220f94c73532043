from __future__ import annotations

from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orders_service.core.config import settings
from orders_service.core.metrics import ORDERS_DB_OPERATIONS_TOTAL
from orders_service.models.order import Order, OrderStatus


def _count(operation: str, status: str) -> None:
    ORDERS_DB_OPERATIONS_TOTAL.labels(
        service=settings.SERVICE_NAME,
        operation=operation,
        status=status,
    ).inc()


def _orders_query():
    return select(Order).options(selectinload(Order.items)).order_by(Order.created_at)


async def get_order_from_db(order_id: UUID, db: AsyncSession) -> Order | None:
    logger.info(
        "Fetching order from DB. order_id='{order_id}'",
        order_id=str(order_id),
    )
    res = await db.execute(_orders_query().where(Order.id == order_id))
    order = res.scalar_one_or_none()
    _count("get", "success" if order else "not_found")
    return order


async def get_all_orders_from_db(db: AsyncSession) -> list[Order]:
    logger.info("Fetching all orders from DB")
    res = await db.execute(_orders_query())
    orders = list(res.scalars().all())
    _count("get_all", "success")
    return orders


async def get_orders_by_customer_email_from_db(email: str, db: AsyncSession) -> list[Order]:
    logger.info(
        "Fetching orders from DB for customer_email='{email}'",
        email=email,
    )
    res = await db.execute(_orders_query().where(Order.customer_email == email))
    orders = list(res.scalars().all())
    _count("find_by_email", "success")
    return orders


async def get_orders_by_status_from_db(status: OrderStatus, db: AsyncSession) -> list[Order]:
    logger.info(
        "Fetching orders from DB with status='{status}'",
        status=status.value,
    )
    res = await db.execute(_orders_query().where(Order.status == status.value))
    orders = list(res.scalars().all())
    _count("find_by_status", "success")
    return orders


async def save_order_in_db(order: Order, db: AsyncSession) -> Order:
    """Add the order (items cascade with it) and commit as one unit."""
    db.add(order)
    await db.commit()
    logger.info(
        "Order persisted in DB. order_id='{order_id}', items={items_count}",
        order_id=str(order.id),
        items_count=len(order.items),
    )
    _count("save", "success")
    return order


async def delete_order_from_db(order: Order, db: AsyncSession) -> None:
    await db.delete(order)
    await db.commit()
    logger.info(
        "Order deleted from DB. order_id='{order_id}'",
        order_id=str(order.id),
    )
    _count("delete", "success")
