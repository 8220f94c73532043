class OrderError(Exception):
    pass


class OrderValidationError(OrderError):
    pass


class EmptyOrderError(OrderValidationError):
    def __init__(self):
        super().__init__("Order must contain at least one item")


class OrderNotFoundError(OrderError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order not found with id: {order_id}")


class ProductUnavailableError(OrderError):
    """The catalog could not confirm the product: missing or unreachable alike."""

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product Service unavailable or product not found: {product_id}")


class PersistenceFailedError(OrderError):
    pass


class OrderTotalTooLargeError(OrderValidationError):
    def __init__(self, total, limit):
        self.total = total
        super().__init__(f"Order total {total} exceeds the maximum of {limit}")
