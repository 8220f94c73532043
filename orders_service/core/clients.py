from uuid import UUID

import httpx
from loguru import logger

from orders_service.core.config import CatalogClientConfig, settings
from orders_service.core.errors import ProductUnavailableError
from orders_service.core.metrics import CATALOG_FETCH_PRODUCT_TOTAL
from orders_service.schemas.product import ProductSnapshot


class ProductLookupClient:
    """Asks the catalog whether a product exists and returns its data.

    Every failure (connection error, timeout, non-2xx status, empty or
    malformed body) is reported as ``ProductUnavailableError``: the caller
    cannot tell a missing product from an unreachable catalog. One attempt
    per call, no retries.
    """

    def __init__(
        self,
        config: CatalogClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            auth=httpx.BasicAuth(self._config.username, self._config.password),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(
                self._config.read_timeout,
                connect=self._config.connect_timeout,
            ),
            transport=self._transport,
        )

    def _count(self, status: str) -> None:
        CATALOG_FETCH_PRODUCT_TOTAL.labels(
            service=settings.SERVICE_NAME,
            status=status,
        ).inc()

    async def validate_exists(self, product_id: UUID) -> ProductSnapshot:
        logger.info(
            "Validating product '{product_id}' exists in Catalog Service",
            product_id=str(product_id),
        )

        async with self._client() as client:
            try:
                resp = await client.get(f"/products/{product_id}")
            except httpx.HTTPError as e:
                logger.error(
                    "Catalog Service request failed for product '{product_id}': {error_type} - {error}",
                    product_id=str(product_id),
                    error_type=type(e).__name__,
                    error=str(e),
                )
                self._count("connection_error")
                raise ProductUnavailableError(product_id) from e

        if not resp.is_success or not resp.content:
            logger.warning(
                "Invalid response from Catalog Service for product '{product_id}': status={status}",
                product_id=str(product_id),
                status=resp.status_code,
            )
            self._count("bad_status" if not resp.is_success else "empty_body")
            raise ProductUnavailableError(product_id)

        try:
            snapshot = ProductSnapshot.model_validate(resp.json())
        except ValueError as e:
            # pydantic ValidationError тоже ValueError, как и битый JSON
            logger.error(
                "Catalog Service returned bad product payload for '{product_id}'",
                product_id=str(product_id),
            )
            self._count("bad_payload")
            raise ProductUnavailableError(product_id) from e

        logger.info(
            "Product '{product_id}' validated successfully: name='{name}'",
            product_id=str(product_id),
            name=snapshot.name,
        )
        self._count("success")
        return snapshot
