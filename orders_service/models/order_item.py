import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orders_service.models.base import Base, uuidpk

if TYPE_CHECKING:
    from orders_service.models.order import Order


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[uuidpk]
    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    # ссылка на товар каталога по id, без FK: это другой сервис
    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship(back_populates="items")

    def calculate_total_price(self) -> Decimal:
        self.total_price = self.unit_price * self.quantity
        return self.total_price
