"""Pytest configuration and fixtures"""
import asyncio
import json
import os

import httpx
import pytest

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("INVENTORY_SERVICE_URL", "http://inventory.test")

from services.cart_service import CartService
from services.cart_store import CartStore
from services.inventory_service import InventoryClient
from services.storage import MemoryStorage

CART_KEY = "@RocketShoes:cart"


class CollectingNotifier:
    """Keeps every reported message for assertions"""

    def __init__(self):
        self.messages = []

    def report(self, message, severity="error"):
        self.messages.append((message, severity))


class InventoryStub:
    """Stands in for the inventory service behind an httpx.MockTransport."""

    def __init__(self):
        self.stock = {}
        self.products = {}
        self.down = False
        self.requests = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0) # suspend like a real network call would
        self.requests.append(request.url.path)
        if self.down:
            raise httpx.ConnectError("inventory unreachable", request=request)

        kind, _, raw_id = request.url.path.strip("/").partition("/")
        records = self.stock if kind == "stock" else self.products
        record = records.get(int(raw_id))
        if record is None:
            return httpx.Response(404, json={})
        return httpx.Response(200, json=record)

    def add_product(self, item_id, stock, **display):
        self.stock[item_id] = {"id": item_id, "amount": stock}
        self.products[item_id] = {"id": item_id, **display}


@pytest.fixture
def inventory():
    """Inventory service with two products"""
    stub = InventoryStub()
    stub.add_product(1, 5, title="Tênis de Caminhada Leve Confortável", price=179.9, image="https://img.test/1.jpg")
    stub.add_product(2, 3, title="Tênis VR Caminhada Confortável", price=139.9, image="https://img.test/2.jpg")
    return stub


@pytest.fixture
def inventory_client(inventory):
    return InventoryClient("http://inventory.test", transport=httpx.MockTransport(inventory.handler))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def make_service(storage, inventory_client, notifier):
    """Build a cart service over a cart already holding the given lines"""
    def _make(items=(), serialize=False):
        if items:
            storage.set(CART_KEY, json.dumps(list(items)))
        store = CartStore(storage, CART_KEY)
        return CartService(store, inventory_client, notifier, serialize=serialize)
    return _make


def persisted(storage):
    """The cart as it sits in storage, as plain dicts"""
    raw = storage.get(CART_KEY)
    return json.loads(raw) if raw is not None else None


def in_memory(service):
    return [item.model_dump() for item in service.items]
