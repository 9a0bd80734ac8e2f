"""
Types valeur partagés (catalogue, panier, commande, identité, montants).
"""

from .money import D, Money, ensure_valid_price, format_amount, to_minor_units
from .catalog import Product, ProductSnapshot
from .cart import Cart, CartItem, CartLine, ReconciledCart
from .order import Order, OrderLine
from .identity import Identity

__all__ = [
    # money
    "D",
    "Money",
    "ensure_valid_price",
    "format_amount",
    "to_minor_units",
    # catalog
    "Product",
    "ProductSnapshot",
    # cart
    "Cart",
    "CartItem",
    "CartLine",
    "ReconciledCart",
    # orders
    "Order",
    "OrderLine",
    # identity
    "Identity",
]
