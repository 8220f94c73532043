import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.core.config import settings
from catalog_service.core.errors import DuplicateSkuError, ProductNotFoundError
from catalog_service.core.metrics import PRODUCTS_DB_OPERATIONS_TOTAL
from catalog_service.models.product import Product
from catalog_service.schemas.product import ProductCreate, ProductRead, ProductUpdate


def _count(operation: str, status: str) -> None:
    PRODUCTS_DB_OPERATIONS_TOTAL.labels(
        service=settings.SERVICE_NAME,
        operation=operation,
        status=status,
    ).inc()


async def _get_product_or_raise(id: uuid.UUID, db: AsyncSession, operation: str) -> Product:
    result = await db.execute(select(Product).where(Product.id == id))
    product = result.scalar_one_or_none()
    if not product:
        logger.warning(
            "Product not found in DB for {operation}: id={id}",
            operation=operation,
            id=id,
        )
        _count(operation, "not_found")
        raise ProductNotFoundError(id)
    return product


async def get_all_products_from_db(db: AsyncSession) -> list[ProductRead]:
    logger.info("Request to get all products from DB")

    result = await db.execute(select(Product).order_by(Product.created_at))
    products = result.scalars().all()

    logger.info(
        "Products list retrieved from DB, count={count}",
        count=len(products),
    )
    _count("get_all", "success")

    return [ProductRead.model_validate(p) for p in products]


async def get_product_from_db(id: uuid.UUID, db: AsyncSession) -> ProductRead:
    logger.info(
        "Request to get product from DB with id={id}",
        id=id,
    )

    product = await _get_product_or_raise(id, db, "get")

    logger.info(
        "Product successfully retrieved from DB with id={id}",
        id=id,
    )
    _count("get", "success")

    return ProductRead.model_validate(product)


async def get_product_by_sku_from_db(sku: str, db: AsyncSession) -> Product | None:
    logger.debug("Looking up product by sku='{sku}'", sku=sku)

    result = await db.execute(select(Product).where(Product.sku == sku))
    return result.scalar_one_or_none()


async def create_product_in_db(data: ProductCreate, db: AsyncSession) -> ProductRead:
    logger.info(
        "Attempt to create a new product with sku='{sku}'",
        sku=data.sku,
    )

    existing = await get_product_by_sku_from_db(data.sku, db)
    if existing is not None:
        logger.warning(
            "Product with sku='{sku}' already exists: id={id}",
            sku=data.sku,
            id=existing.id,
        )
        _count("create", "duplicate_sku")
        raise DuplicateSkuError(data.sku)

    new_product = Product(**data.model_dump())
    db.add(new_product)
    try:
        await db.commit()
    except IntegrityError as e:
        # другой запрос успел вставить тот же SKU между проверкой и commit
        await db.rollback()
        logger.warning(
            "Unique constraint rejected sku='{sku}' on commit",
            sku=data.sku,
        )
        _count("create", "duplicate_sku")
        raise DuplicateSkuError(data.sku) from e
    await db.refresh(new_product)

    logger.info(
        "Product successfully created in DB: id={id}, sku='{sku}'",
        id=new_product.id,
        sku=new_product.sku,
    )
    _count("create", "success")

    return ProductRead.model_validate(new_product)


async def update_product_in_db(id: uuid.UUID, data: ProductUpdate, db: AsyncSession) -> ProductRead:
    logger.info(
        "Attempt to update product with id={id}",
        id=id,
    )

    product = await _get_product_or_raise(id, db, "update")

    updates = data.model_dump()
    logger.debug(
        "Applying updates to product id={id}: fields={fields}",
        id=id,
        fields=list(updates.keys()),
    )

    for field, value in updates.items():
        setattr(product, field, value)

    await db.commit()
    await db.refresh(product)

    logger.info(
        "Product successfully updated in DB: id={id}",
        id=id,
    )
    _count("update", "success")

    return ProductRead.model_validate(product)


async def delete_product_from_db(id: uuid.UUID, db: AsyncSession) -> None:
    logger.info(
        "Attempt to delete product with id={id}",
        id=id,
    )

    product = await _get_product_or_raise(id, db, "delete")

    await db.delete(product)
    await db.commit()

    logger.info(
        "Product with id={id} successfully deleted from DB",
        id=id,
    )
    _count("delete", "success")
