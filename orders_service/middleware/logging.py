import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from orders_service.core.metrics import HTTP_REQUESTS_TOTAL, HTTP_REQUEST_DURATION_SECONDS

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access log line and one metrics sample per request.

    Every record logged while the request is handled carries request_id,
    taken from the incoming ``X-Request-ID`` header or generated, and the id
    is echoed back in the response. A request whose handler raises is still
    counted, as a 500.
    """

    def __init__(self, app, service: str):
        super().__init__(app)
        self.service = service

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()
        status_code = 500

        with logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                self._record(request, status_code, time.perf_counter() - started)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _record(self, request: Request, status_code: int, elapsed: float) -> None:
        # шаблон маршрута, а не сырой путь: иначе каждый id даёт новую метку
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)

        logger.bind(
            request_path=request.url.path,
            method=request.method,
            status_code=status_code,
            process_time_ms=round(elapsed * 1000, 2),
        ).info("http_request_processed")

        try:
            HTTP_REQUESTS_TOTAL.labels(
                service=self.service,
                method=request.method,
                path=path,
                status_code=str(status_code),
            ).inc()
            HTTP_REQUEST_DURATION_SECONDS.labels(
                service=self.service,
                method=request.method,
                path=path,
            ).observe(elapsed)
        except Exception:
            logger.exception("Error updating Prometheus HTTP metrics")
