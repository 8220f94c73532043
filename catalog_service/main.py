from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from catalog_service.core.config import settings
from catalog_service.core.errors import DuplicateSkuError, ProductNotFoundError
from catalog_service.core.logging import setup_logging
from catalog_service.db import engine
from catalog_service.middleware.logging import LoggingMiddleware
from catalog_service.models.base import Base
from catalog_service.routers import health, metrics, products


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.SERVICE_NAME, settings.LOG_LEVEL)
    logger.info("Application startup: creating catalog tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Application startup completed")
    yield
    logger.info("Application shutdown: disposing DB engine")
    await engine.dispose()


app = FastAPI(title="Product Service", lifespan=lifespan)


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(DuplicateSkuError)
async def duplicate_sku_handler(request: Request, exc: DuplicateSkuError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


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
app.include_router(products.router)


if __name__ == "__main__":
    uvicorn.run("catalog_service.main:app", host="0.0.0.0", port=8000, reload=True)
