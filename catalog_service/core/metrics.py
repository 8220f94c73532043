from prometheus_client import Counter, Histogram


BASIC_AUTH_VALIDATION_TOTAL = Counter(
    "catalog_auth_basic_validation_total",
    "Basic credentials validation events",
    ["service", "result"],
)

HTTP_REQUESTS_TOTAL = Counter(
    "catalog_http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "catalog_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "path"],
)

PRODUCTS_DB_OPERATIONS_TOTAL = Counter(
    "catalog_products_db_operations_total",
    "Products DB operations",
    ["service", "operation", "status"],
)
