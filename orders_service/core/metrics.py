from prometheus_client import Counter, Histogram


CATALOG_FETCH_PRODUCT_TOTAL = Counter(
    "orders_catalog_fetch_product_total",
    "Fetch product requests to Catalog Service",
    ["service", "status"],
)

ORDERS_DB_OPERATIONS_TOTAL = Counter(
    "orders_orders_db_operations_total",
    "Orders DB operations",
    ["service", "operation", "status"],
)

ORDERS_SERVICE_OPERATIONS_TOTAL = Counter(
    "orders_service_operations_total",
    "Order service operations",
    ["service", "operation", "status"],
)

HTTP_REQUESTS_TOTAL = Counter(
    "orders_http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "orders_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "path"],
)
