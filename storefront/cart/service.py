"""
Cas d'usage 'cart': lecture réconciliée, ajout, retrait, vidage.
- Toute réparation est persistée sur l'utilisateur ET sur la copie de session avant de rendre la main.
- session: mapping de session Starlette (request.session) ou None hors contexte web.
"""
from typing import Any, Dict, MutableMapping, Optional
import logging

from storefront.catalog import repository as catalog_repository
from storefront.catalog.service import get_product
from storefront.models import Cart, Identity, ReconciledCart, format_amount
from . import repository
from .reconciler import reconcile

logger = logging.getLogger(__name__)

SESSION_CART_KEY = "cart"

def persist_cart(identity: Identity, cart: Cart, session: Optional[MutableMapping[str, Any]] = None) -> Cart:
    """Écriture bloquante: document utilisateur d'abord, puis copie de session."""
    repository.save_cart(identity.id, cart)
    if session is not None:
        session[SESSION_CART_KEY] = cart.to_doc()
    return cart

def get_reconciled_cart(identity: Identity, session: Optional[MutableMapping[str, Any]] = None) -> ReconciledCart:
    """
    Charge le panier, retire les références pendantes et persiste la réparation si besoin.
    - Toujours relu depuis le document utilisateur (la copie de session n'est jamais source).
    """
    cart = repository.load_cart(identity.id)
    reconciled, repaired = reconcile(cart, catalog_repository.find_product_by_id)
    if repaired:
        persist_cart(identity, reconciled.cart, session)
        logger.info(
            "cart.service repaired user_id=%s before=%s after=%s",
            identity.id, len(cart), len(reconciled.lines),
        )
    return reconciled

def add_to_cart(identity: Identity, product_id: str, session: Optional[MutableMapping[str, Any]] = None) -> Cart:
    """Ajoute une unité du produit (incrémente la ligne existante). NotFoundError si le produit n'existe pas."""
    product = get_product(product_id)
    cart = repository.load_cart(identity.id).add(product.id)
    return persist_cart(identity, cart, session)

def remove_from_cart(identity: Identity, product_id: str, session: Optional[MutableMapping[str, Any]] = None) -> Cart:
    cart = repository.load_cart(identity.id).remove(str(product_id))
    return persist_cart(identity, cart, session)

def clear_cart(identity: Identity, session: Optional[MutableMapping[str, Any]] = None) -> Cart:
    return persist_cart(identity, Cart(), session)

def cart_summary(reconciled: ReconciledCart) -> Dict[str, Any]:
    """Vue JSON du panier réconcilié avec le total décimal."""
    total = sum((l.subtotal for l in reconciled.lines), start=0)
    data = reconciled.to_dict()
    data["total"] = format_amount(total)
    return data
