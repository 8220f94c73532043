class CatalogError(Exception):
    pass


class ProductNotFoundError(CatalogError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found with id: {product_id}")


class DuplicateSkuError(CatalogError):
    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"Product with SKU {sku} already exists")
