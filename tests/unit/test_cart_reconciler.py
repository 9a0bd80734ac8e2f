from decimal import Decimal

from storefront.cart.reconciler import reconcile
from storefront.models import Cart, Product


def _catalog(*products):
    by_id = {p.id: p for p in products}
    return by_id.get


def _product(pid, price="10.00"):
    return Product(id=pid, title=f"Produit {pid}", description="", price=Decimal(price))


def test_reconcile_keeps_resolved_lines_in_order():
    cart = Cart.from_doc({"items": [{"product_id": "B", "quantity": 1}, {"product_id": "A", "quantity": 2}]})
    reconciled, repaired = reconcile(cart, _catalog(_product("A"), _product("B")))
    assert repaired is False
    assert [(l.product.id, l.quantity) for l in reconciled.lines] == [("B", 1), ("A", 2)]


def test_reconcile_drops_deleted_product():
    cart = Cart.from_doc({"items": [{"product_id": "A", "quantity": 2}, {"product_id": "GONE", "quantity": 1}]})
    reconciled, repaired = reconcile(cart, _catalog(_product("A")))
    assert repaired is True
    assert len(reconciled.cart) == len(cart) - 1
    assert reconciled.cart.to_doc() == {"items": [{"product_id": "A", "quantity": 2}]}


def test_reconcile_is_idempotent():
    lookup = _catalog(_product("A"), _product("C"))
    cart = Cart.from_doc({"items": [
        {"product_id": "A", "quantity": 1},
        {"product_id": "B", "quantity": 3},
        {"product_id": "C", "quantity": 2},
    ]})
    first, _ = reconcile(cart, lookup)
    second, repaired = reconcile(first.cart, lookup)
    assert repaired is False
    assert second.cart == first.cart


def test_reconcile_empty_cart():
    reconciled, repaired = reconcile(Cart(), _catalog())
    assert reconciled.is_empty
    assert repaired is False
