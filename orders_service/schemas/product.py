from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ProductSnapshot(BaseModel):
    """Catalog product as seen by the orders service at lookup time."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    name: str
    description: str
    price: Decimal
    quantity: int
    sku: str
