from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from orders_service.core.config import settings
from orders_service.core.errors import (
    OrderNotFoundError,
    OrderValidationError,
    PersistenceFailedError,
    ProductUnavailableError,
)
from orders_service.core.logging import setup_logging
from orders_service.db import engine
from orders_service.middleware.logging import LoggingMiddleware
from orders_service.models import Base
from orders_service.routers import health, metrics, orders

ERROR_STATUS_CODES = {
    OrderValidationError: status.HTTP_400_BAD_REQUEST,
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    ProductUnavailableError: status.HTTP_409_CONFLICT,
    PersistenceFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.SERVICE_NAME, settings.LOG_LEVEL)
    logger.info("Application startup: creating orders tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Application startup completed")
    yield
    logger.info("Application shutdown: disposing DB engine")
    await engine.dispose()


app = FastAPI(
    title="Orders Service",
    lifespan=lifespan,
)


async def order_error_handler(request: Request, exc: Exception):
    status_code = next(
        code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)
    )
    if status_code >= 500:
        logger.error("Order request failed: {error}", error=str(exc))
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


for error_type in ERROR_STATUS_CODES:
    app.add_exception_handler(error_type, order_error_handler)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Request validation failed for path={path}: {errors}",
        path=request.url.path,
        errors=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.add_middleware(LoggingMiddleware, service=settings.SERVICE_NAME)

app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(orders.router)


if __name__ == "__main__":
    uvicorn.run("orders_service.main:app", host="0.0.0.0", port=8000, reload=True)
