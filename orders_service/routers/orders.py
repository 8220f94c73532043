from uuid import UUID

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from orders_service.core.clients import ProductLookupClient
from orders_service.db import get_db
from orders_service.dependencies.depend import get_product_lookup_client
from orders_service.models.order import OrderStatus
from orders_service.schemas.order import OrderCreate, OrderOut, OrderUpdate
from orders_service.service.orders import (
    create_order as svc_create_order,
    delete_order as svc_delete_order,
    get_all_orders as svc_get_all_orders,
    get_order as svc_get_order,
    get_orders_by_customer_email as svc_get_orders_by_customer_email,
    get_orders_by_status as svc_get_orders_by_status,
    update_order as svc_update_order,
)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=list[OrderOut])
async def get_all_orders(db: AsyncSession = Depends(get_db)):
    logger.info("Get all orders request received")
    return await svc_get_all_orders(db)


@router.get("/customer/{email}", response_model=list[OrderOut])
async def get_orders_by_customer_email(email: str, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Get orders by customer request received. customer_email='{email}'",
        email=email,
    )
    return await svc_get_orders_by_customer_email(db, email)


@router.get("/status/{order_status}", response_model=list[OrderOut])
async def get_orders_by_status(order_status: OrderStatus, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Get orders by status request received. status='{status}'",
        status=order_status.value,
    )
    return await svc_get_orders_by_status(db, order_status)


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: UUID, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Get order request received. order_id='{order_id}'",
        order_id=str(order_id),
    )
    return await svc_get_order(db, order_id)


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    product_client: ProductLookupClient = Depends(get_product_lookup_client),
):
    logger.info(
        "Create order request received for customer_email='{email}'",
        email=payload.customer_email,
    )
    created_order = await svc_create_order(db, payload, product_client)
    logger.info(
        "Order created via service. order_id='{order_id}', total_price={total_price}",
        order_id=str(created_order.id),
        total_price=str(created_order.total_price),
    )
    return created_order


@router.put("/{order_id}", response_model=OrderOut)
async def update_order(order_id: UUID, payload: OrderUpdate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Update order request received. order_id='{order_id}', new_status='{status}'",
        order_id=str(order_id),
        status=payload.status.value,
    )
    return await svc_update_order(db, order_id, payload)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: UUID, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Delete order request received. order_id='{order_id}'",
        order_id=str(order_id),
    )
    await svc_delete_order(db, order_id)
    return None
