from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from orders_service.models.order import OrderStatus


MAX_ITEM_QUANTITY = 10_000


class OrderItemIn(BaseModel):
    product_id: UUID
    quantity: int = Field(ge=1, le=MAX_ITEM_QUANTITY)
    # если не передана, берётся цена из каталога на момент создания
    unit_price: Decimal | None = Field(default=None, ge=Decimal("0.01"), max_digits=10, decimal_places=2)


class OrderCustomer(BaseModel):
    customer_name: str = Field(min_length=3, max_length=100)
    customer_email: EmailStr = Field(max_length=100)
    shipping_address: str = Field(min_length=10, max_length=255)


class OrderCreate(OrderCustomer):
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItemIn] = Field(default_factory=list)


class OrderUpdate(OrderCustomer):
    status: OrderStatus


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str
    customer_email: str
    shipping_address: str
    status: OrderStatus
    total_price: Decimal
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]
