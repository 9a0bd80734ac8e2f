"""
Matérialisation d'une commande à partir d'un panier réconcilié.
"""
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional
import logging

from storefront.cart import service as cart_service
from storefront.errors import EmptyCartError, ShopError
from storefront.models import Identity, Order, OrderLine, ProductSnapshot, ReconciledCart
from . import repository

logger = logging.getLogger(__name__)

# module storefront.orders.materializer
def materialize(
    user_id: str,
    user_email: str,
    reconciled: ReconciledCart,
    *,
    checkout_session_id: Optional[str] = None,
    session: Optional[MutableMapping[str, Any]] = None,
) -> Order:
    """
    Fige le panier en commande puis vide le panier de l'utilisateur.
    - Chaque ligne reçoit une copie par valeur du produit (ProductSnapshot), jamais une référence.
    - EmptyCartError (et aucune écriture) si le panier est vide.
    - Si le vidage du panier échoue après l'enregistrement, la commande est conservée
      (l'échec est journalisé; les lignes restantes seront revues par la réconciliation).
    """
    if reconciled.is_empty:
        raise EmptyCartError("Impossible de créer une commande sur un panier vide")

    lines = tuple(
        OrderLine(quantity=line.quantity, product=ProductSnapshot.of(line.product))
        for line in reconciled.lines
    )
    order = Order(
        user_id=user_id,
        user_email=user_email,
        lines=lines,
        created_at=datetime.now(timezone.utc),
        checkout_session_id=checkout_session_id,
    )
    saved = repository.insert_order(order)
    logger.info(
        "orders.materializer created order_id=%s user_id=%s lines=%s checkout_session_id=%s",
        saved.id, user_id, len(lines), checkout_session_id,
    )

    try:
        cart_service.clear_cart(Identity(id=user_id, email=user_email), session=session)
    except ShopError:
        logger.exception("orders.materializer clear_cart failed order_id=%s user_id=%s", saved.id, user_id)
    return saved
