"""
pytest configuration and fixtures for the items suite
Every test runs against a fresh in-memory store; no database is required.
"""

import os

# Must be set before the settings module is imported
os.environ["STORE_BACKEND"] = "memory"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from app import create_app  # noqa: E402
from database.memory_store import MemoryDocumentStore  # noqa: E402
from services.item_controller import ItemController  # noqa: E402
from services.items_service import ItemsService  # noqa: E402


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def items_collection(store):
    return store.collection("items")


@pytest.fixture
def items_service(items_collection):
    return ItemsService(items_collection)


@pytest.fixture
def controller(items_service):
    return ItemController(items_service)


async def _client_for(store):
    app = create_app(store=store, items_collection="items")
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


@pytest_asyncio.fixture
async def client(store):
    """HTTP client bound to an app using the test store"""
    async with await _client_for(store) as http_client:
        yield http_client


@pytest.fixture
def client_for():
    """Build a client for an app on a custom store (e.g. a failing one)"""
    return _client_for
