import uuid

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.core.errors import CatalogError
from catalog_service.crud.products import (
    create_product_in_db,
    delete_product_from_db,
    get_all_products_from_db,
    get_product_from_db,
    update_product_in_db,
)
from catalog_service.db import get_db
from catalog_service.dependencies.depend import authentication_get_service_user
from catalog_service.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(authentication_get_service_user)],
)


@router.get("", response_model=list[ProductRead])
async def get_all_products(db: AsyncSession = Depends(get_db)):
    logger.info("Request to GET all products")

    try:
        response = await get_all_products_from_db(db)
        logger.info(
            "Successfully retrieved products list, count={count}",
            count=len(response),
        )
        return response
    except Exception:
        logger.exception("Error while getting all products")
        raise


@router.get("/{id}", response_model=ProductRead)
async def get_product(id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to GET product with id={id}",
        id=id,
    )

    try:
        return await get_product_from_db(id, db)
    except CatalogError:
        raise
    except Exception:
        logger.exception(
            "Error while getting product with id={id}",
            id=id,
        )
        raise


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to CREATE product with sku='{sku}'",
        sku=data.sku,
    )

    try:
        response = await create_product_in_db(data, db)
        logger.info(
            "Product successfully created: id={id}",
            id=response.id,
        )
        return response
    except CatalogError:
        raise
    except Exception:
        logger.exception("Error while creating product")
        raise


@router.put("/{id}", response_model=ProductRead)
async def update_product(id: uuid.UUID, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to UPDATE product with id={id}",
        id=id,
    )

    try:
        return await update_product_in_db(id, data, db)
    except CatalogError:
        raise
    except Exception:
        logger.exception(
            "Error while updating product with id={id}",
            id=id,
        )
        raise


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to DELETE product with id={id}",
        id=id,
    )

    try:
        await delete_product_from_db(id, db)
    except CatalogError:
        raise
    except Exception:
        logger.exception(
            "Error while deleting product with id={id}",
            id=id,
        )
        raise
    return None
