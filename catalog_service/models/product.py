from decimal import Decimal
from typing import Annotated

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, uuidpk, created_ts, updated_ts


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuidpk]
    name: Mapped[Annotated[str, mapped_column(String(100), nullable=False)]]
    description: Mapped[Annotated[str, mapped_column(Text, nullable=False)]]
    price: Mapped[Annotated[Decimal, mapped_column(Numeric(10, 2), nullable=False)]]
    quantity: Mapped[Annotated[int, mapped_column(Integer, nullable=False)]]
    # уникальность SKU держит ещё и БД: закрывает гонку двух одновременных create
    sku: Mapped[Annotated[str, mapped_column(String(50), nullable=False, unique=True, index=True)]]
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]
