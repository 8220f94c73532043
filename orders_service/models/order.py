from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orders_service.models.base import Base, created_ts, updated_ts, uuidpk

if TYPE_CHECKING:
    from orders_service.models.order_item import OrderItem


# предел для Numeric(10, 2)
MAX_MONEY_AMOUNT = Decimal("99999999.99")


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuidpk]
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    shipping_address: Mapped[str] = mapped_column(String(255), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.PENDING.value, index=True
    )
    created_at: Mapped[created_ts]
    updated_at: Mapped[updated_ts]

    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

    def calculate_total_price(self) -> Decimal:
        """Sum of item line totals; zero for an order without items."""
        self.total_price = sum(
            (item.calculate_total_price() for item in self.items),
            Decimal("0.00"),
        )
        return self.total_price

    def add_item(self, item: "OrderItem") -> None:
        if item not in self.items:
            item.position = len(self.items)
        # back_populates сам добавляет item в self.items
        item.order = self
        if item not in self.items:
            self.items.append(item)
        self.calculate_total_price()
