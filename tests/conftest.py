"""Shared pytest fixtures for the storefront test suite."""
from __future__ import annotations

import pytest
from aiohttp import web

from storefront.core.images import configure_public_scheme
from storefront.integrations.storage import MemoryKeyValueStorage
from storefront.services.cart_store import CartStore


@pytest.fixture(autouse=True)
def _reset_public_scheme():
    configure_public_scheme("https")
    yield
    configure_public_scheme("https")


@pytest.fixture()
async def aiohttp_client():
    """Minimal aiohttp_client fixture to avoid pytest-aiohttp dependency."""
    clients: list[object] = []

    async def _make_client(app):
        from aiohttp.test_utils import TestClient, TestServer

        server = TestServer(app)
        client = TestClient(server)
        await client.start_server()
        clients.append(client)
        return client

    try:
        yield _make_client
    finally:
        for client in clients:
            await client.close()


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture()
def cart(storage: MemoryKeyValueStorage) -> CartStore:
    return CartStore(storage)


@pytest.fixture()
def tee() -> dict:
    return {
        "id": 7,
        "name": "Box Logo Tee",
        "price": 19.99,
        "imageUrl": "images/tee.jpg",
        "ProductSize": [
            {"stock": 0, "Size": {"size": "S"}},
            {"stock": 4, "Size": {"size": "M"}},
            {"stock": 2, "Size": {"size": "L"}},
        ],
    }


@pytest.fixture()
def cap() -> dict:
    return {"product_id": 11, "name": "Dad Cap", "price": "24.50", "image_url": "//cdn.example.com/cap.png"}


class FakeBackend:
    """In-process stand-in for the orders/products API."""

    def __init__(self) -> None:
        self.orders: dict[str, dict] = {}
        self.created: list[dict] = []
        self.products: list[dict] = []
        self.create_status = 201
        self.create_body: dict | None = None
        self.requests: list[tuple[str, str, dict]] = []

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/orders", self.create_order)
        app.router.add_get("/api/orders/{order_id}", self.get_order)
        app.router.add_get("/api/products", self.list_products)
        app.router.add_get("/api/products/{product_id}", self.get_product)
        return app

    async def create_order(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(("POST", request.path, dict(request.query)))
        self.created.append(body)
        if self.create_status >= 400:
            return web.json_response({"error": "nope"}, status=self.create_status)
        if self.create_body is not None:
            return web.json_response(self.create_body, status=self.create_status)
        order_id = str(100 + len(self.created))
        record = {
            "order_id": order_id,
            "amount": body["amount"],
            "Cart": {
                "CartItem": [
                    {
                        "product_id": item["productId"],
                        "quantity": item["quantity"],
                        "Product": {"name": f"Product {item['productId']}", "image": "img/p.jpg"},
                    }
                    for item in body["items"]
                ]
            },
        }
        self.orders[order_id] = record
        return web.json_response({"order_id": order_id}, status=self.create_status)

    async def get_order(self, request: web.Request) -> web.Response:
        self.requests.append(("GET", request.path, dict(request.query)))
        record = self.orders.get(request.match_info["order_id"])
        if record is None:
            return web.json_response({"error": "not found"}, status=404)
        return web.json_response(record)

    async def list_products(self, request: web.Request) -> web.Response:
        self.requests.append(("GET", request.path, dict(request.query)))
        return web.json_response(self.products)

    async def get_product(self, request: web.Request) -> web.Response:
        self.requests.append(("GET", request.path, dict(request.query)))
        wanted = request.match_info["product_id"]
        for product in self.products:
            if str(product.get("id", product.get("product_id"))) == wanted:
                return web.json_response(product)
        return web.json_response({"error": "not found"}, status=404)


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def backend_url(aiohttp_client, backend: FakeBackend) -> str:
    client = await aiohttp_client(backend.app())
    return str(client.make_url("/")).rstrip("/")
