import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    price: Decimal = Field(ge=Decimal("0.01"), max_digits=10, decimal_places=2)
    quantity: int = Field(ge=0)


class ProductCreate(ProductBase):
    sku: str = Field(min_length=1, max_length=50, pattern=r"\S")


class ProductUpdate(ProductBase):
    """SKU is not part of the update payload: it is fixed at creation."""


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sku: str
    created_at: datetime
    updated_at: datetime
