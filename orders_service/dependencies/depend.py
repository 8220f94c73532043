from fastapi import Depends

from orders_service.core.clients import ProductLookupClient
from orders_service.core.config import Settings, get_settings


def get_product_lookup_client(settings: Settings = Depends(get_settings)) -> ProductLookupClient:
    return ProductLookupClient(settings.catalog_client_config())
