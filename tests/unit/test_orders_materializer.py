import pytest
from dataclasses import replace
from decimal import Decimal

from storefront.cart.reconciler import reconcile
from storefront.errors import EmptyCartError, RepositoryError
from storefront.invoices.renderer import invoice_lines
from storefront.models import ReconciledCart
from storefront.orders.materializer import materialize


def _reconciled(shop, user_id="u1"):
    reconciled, _ = reconcile(shop.load_cart(user_id), shop.find_product_by_id)
    return reconciled


def test_materialize_snapshots_lines_and_clears_cart(shop):
    shop.add_product("A", "10.00", title="Mug")
    shop.add_product("B", "5.00", title="Pen")
    shop.set_cart("u1", ("A", 2), ("B", 1))
    session = {"cart": {"items": [{"product_id": "A", "quantity": 2}]}}

    order = materialize("u1", "u1@example.com", _reconciled(shop), checkout_session_id="cs_1", session=session)

    assert order.id == "order-1"
    assert order.created_at is not None
    assert [(l.product.title, l.quantity) for l in order.lines] == [("Mug", 2), ("Pen", 1)]
    assert order.total == Decimal("25.00")
    assert len(shop.carts["u1"]) == 0
    assert session["cart"] == {"items": []}


def test_snapshot_unaffected_by_later_product_changes(shop):
    shop.add_product("A", "10.00", title="Mug")
    shop.set_cart("u1", ("A", 3))
    order = materialize("u1", "", _reconciled(shop))
    before = list(invoice_lines(order))

    shop.products["A"] = replace(shop.products["A"], title="Renamed", price=Decimal("99.00"))
    del shop.products["A"]

    stored = shop.get_order_by_id(order.id)
    assert list(invoice_lines(stored)) == before
    assert stored.total == Decimal("30.00")


def test_materialize_empty_cart_persists_nothing(shop):
    shop.set_cart("u1")
    with pytest.raises(EmptyCartError):
        materialize("u1", "", ReconciledCart())
    assert shop.orders == {}
    assert shop.saved_carts == []


def test_insert_failure_leaves_cart(shop, monkeypatch):
    shop.add_product("A", "10.00")
    shop.set_cart("u1", ("A", 1))

    def _fail(order):
        raise RepositoryError("down")

    monkeypatch.setattr("storefront.orders.repository.insert_order", _fail)
    with pytest.raises(RepositoryError):
        materialize("u1", "", _reconciled(shop))
    assert len(shop.carts["u1"]) == 1


def test_clear_failure_keeps_saved_order(shop, monkeypatch, caplog):
    shop.add_product("A", "10.00")
    shop.set_cart("u1", ("A", 1))

    def _fail(user_id, cart):
        raise RepositoryError("down")

    monkeypatch.setattr("storefront.cart.repository.save_cart", _fail)
    order = materialize("u1", "", _reconciled(shop))

    assert order.id in shop.orders
    assert "clear_cart failed" in caplog.text
