from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog_service.core.config import settings as catalog_settings
from catalog_service.db import get_db as catalog_get_db
from catalog_service.main import app as catalog_app
from catalog_service.models.base import Base as CatalogBase
from orders_service.core.clients import ProductLookupClient
from orders_service.core.config import CatalogClientConfig
from orders_service.db import get_db as orders_get_db
from orders_service.dependencies.depend import get_product_lookup_client
from orders_service.main import app as orders_app
from orders_service.models import Base as OrdersBase

CATALOG_BASE_URL = "http://catalog"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def anyio_backend():
    return "asyncio"


async def _sqlite_session_factory(metadata):
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    return engine, async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


def _override_get_db(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    return _get_db


@pytest.fixture
async def catalog_sessions():
    engine, session_factory = await _sqlite_session_factory(CatalogBase.metadata)
    yield session_factory
    await engine.dispose()


@pytest.fixture
async def orders_sessions():
    engine, session_factory = await _sqlite_session_factory(OrdersBase.metadata)
    yield session_factory
    await engine.dispose()


@pytest.fixture
def catalog_credentials():
    return catalog_settings.SERVICE_USERNAME, catalog_settings.SERVICE_PASSWORD


@pytest.fixture
def catalog_asgi(catalog_sessions):
    catalog_app.dependency_overrides[catalog_get_db] = _override_get_db(catalog_sessions)
    yield catalog_app
    catalog_app.dependency_overrides.clear()


@pytest.fixture
async def catalog_client(catalog_asgi, catalog_credentials):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=catalog_asgi),
        base_url=CATALOG_BASE_URL,
        auth=catalog_credentials,
    ) as client:
        yield client


@pytest.fixture
def catalog_transport(catalog_asgi):
    """Transport the orders service uses to reach the in-process catalog."""
    return httpx.ASGITransport(app=catalog_asgi)


@pytest.fixture
def lookup_client_factory(catalog_credentials):
    username, password = catalog_credentials

    def _factory(transport):
        config = CatalogClientConfig(
            base_url=CATALOG_BASE_URL,
            username=username,
            password=password,
            connect_timeout=1.0,
            read_timeout=2.0,
        )
        return ProductLookupClient(config, transport=transport)

    return _factory


@pytest.fixture
def orders_asgi(orders_sessions, catalog_transport, lookup_client_factory):
    orders_app.dependency_overrides[orders_get_db] = _override_get_db(orders_sessions)
    orders_app.dependency_overrides[get_product_lookup_client] = lambda: lookup_client_factory(catalog_transport)
    yield orders_app
    orders_app.dependency_overrides.clear()


@pytest.fixture
async def orders_client(orders_asgi):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=orders_asgi),
        base_url="http://orders",
    ) as client:
        yield client
