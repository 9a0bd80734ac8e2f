import os

# Avant l'import de l'app: pas de Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional, Tuple
from fastapi.testclient import TestClient
from unittest.mock import MagicMock
import httpx

from storefront.app import app as fastapi_app
from storefront.utils.security import require_user
from storefront.models import Cart, Order, Product

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    fake_user: Dict[str, Any] = {
        "id": "test-user",
        "email": "test@example.com",
    }
    app.dependency_overrides[require_user] = lambda: fake_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

# Aucun accès réseau à Supabase pendant les tests
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: MagicMock())

def make_product(pid: str, price, title: Optional[str] = None, description: str = "") -> Product:
    return Product(id=pid, title=title or f"Produit {pid}", description=description, price=Decimal(str(price)))

class FakeShop:
    """Catalogue, paniers et commandes en mémoire, branchés à la place des repositories Supabase."""

    def __init__(self):
        self.products: Dict[str, Product] = {}
        self.carts: Dict[str, Cart] = {}
        self.orders: Dict[str, Order] = {}
        self.saved_carts: List[Tuple[str, Cart]] = []

    def add_product(self, pid: str, price, **kw) -> Product:
        product = make_product(pid, price, **kw)
        self.products[pid] = product
        return product

    def set_cart(self, user_id: str, *lines: Tuple[str, int]) -> Cart:
        cart = Cart.from_doc({"items": [{"product_id": p, "quantity": q} for p, q in lines]})
        self.carts[user_id] = cart
        return cart

    # catalog.repository
    def find_product_by_id(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def list_products(self, page: int, per_page: int):
        rows = list(self.products.values())
        start = (page - 1) * per_page
        return rows[start:start + per_page], len(rows)

    # cart.repository
    def load_cart(self, user_id: str) -> Cart:
        return self.carts.get(user_id, Cart())

    def save_cart(self, user_id: str, cart: Cart) -> Cart:
        self.carts[user_id] = cart
        self.saved_carts.append((user_id, cart))
        return cart

    # orders.repository
    def insert_order(self, order: Order) -> Order:
        oid = f"order-{len(self.orders) + 1}"
        saved = Order.from_row({**order.to_row(), "id": oid})
        self.orders[oid] = saved
        return saved

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        return self.orders.get(order_id)

    def find_order_by_checkout_session(self, checkout_session_id: str) -> Optional[Order]:
        for order in self.orders.values():
            if order.checkout_session_id == checkout_session_id:
                return order
        return None

    def list_user_orders(self, user_id: str) -> List[Order]:
        return [o for o in reversed(list(self.orders.values())) if o.user_id == user_id]

@pytest.fixture
def shop(monkeypatch) -> FakeShop:
    fake = FakeShop()
    monkeypatch.setattr("storefront.catalog.repository.find_product_by_id", fake.find_product_by_id)
    monkeypatch.setattr("storefront.catalog.repository.list_products", fake.list_products)
    monkeypatch.setattr("storefront.cart.repository.load_cart", fake.load_cart)
    monkeypatch.setattr("storefront.cart.repository.save_cart", fake.save_cart)
    monkeypatch.setattr("storefront.orders.repository.insert_order", fake.insert_order)
    monkeypatch.setattr("storefront.orders.repository.get_order_by_id", fake.get_order_by_id)
    monkeypatch.setattr("storefront.orders.repository.find_order_by_checkout_session", fake.find_order_by_checkout_session)
    monkeypatch.setattr("storefront.orders.repository.list_user_orders", fake.list_user_orders)
    return fake

class FakeBucket:
    """Bucket Supabase Storage simulé derrière httpx.MockTransport (journal des appels)."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.calls: List[Tuple[str, str]] = []
        self.fail_put = False
        self.fail_get = False
        # Coupe la relecture après N octets (httpx.ReadError)
        self.break_get_after: Optional[int] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        key = path.rsplit("/", 1)[-1]
        if request.method == "POST":
            self.calls.append(("put", key))
            if self.fail_put:
                return httpx.Response(503, json={"error": "unavailable"})
            self.objects[key] = request.read()
            return httpx.Response(200, json={"Key": f"invoices/{key}"})
        if request.method == "GET":
            self.calls.append(("get", key))
            if self.fail_get or key not in self.objects:
                return httpx.Response(404, json={"error": "not_found"})
            if self.break_get_after is not None:
                return httpx.Response(200, content=self._broken_stream(self.objects[key]), headers={"content-type": "application/pdf"})
            return httpx.Response(200, content=self.objects[key], headers={"content-type": "application/pdf"})
        return httpx.Response(405)

    def _broken_stream(self, data: bytes):
        yield data[:self.break_get_after]
        raise httpx.ReadError("connection reset by peer")

@pytest.fixture
def bucket(monkeypatch) -> FakeBucket:
    fake = FakeBucket()
    monkeypatch.setattr("storefront.infra.storage.SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(
        "storefront.infra.storage._client",
        lambda: httpx.Client(transport=httpx.MockTransport(fake.handler)),
    )
    return fake
