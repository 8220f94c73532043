from orders_service.models.base import Base
from orders_service.models.order import Order, OrderStatus
from orders_service.models.order_item import OrderItem

__all__ = ["Base", "Order", "OrderItem", "OrderStatus"]
