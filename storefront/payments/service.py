"""
Cas d'usage 'payments': orchestre panier, construction de session, Stripe et matérialisation.
- start_checkout: réconcilie (et persiste) le panier, construit puis crée la session Stripe.
- confirm_checkout: vérifie la session payée et sa propriété, puis crée la commande une seule fois par session.
"""
from typing import Any, Dict, MutableMapping, Optional
import logging

from storefront.cart import service as cart_service
from storefront.config import CHECKOUT_SUCCESS_PATH, CHECKOUT_CANCEL_PATH
from storefront.errors import PaymentNotConfirmedError, UnauthorizedError
from storefront.models import Identity, Order, format_amount
from storefront.orders import repository as orders_repository
from storefront.orders.materializer import materialize
from . import stripe_client
from .session_builder import build_session

logger = logging.getLogger(__name__)

def checkout_urls(base_url: str) -> Dict[str, str]:
    """URLs de retour Stripe; la page de succès reçoit session_id={CHECKOUT_SESSION_ID}."""
    base = base_url.rstrip("/")
    sep = "&" if "?" in CHECKOUT_SUCCESS_PATH else "?"
    return {
        "success_url": f"{base}{CHECKOUT_SUCCESS_PATH}{sep}session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{base}{CHECKOUT_CANCEL_PATH}",
    }

def start_checkout(
    identity: Identity,
    base_url: str,
    session: Optional[MutableMapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Prépare la session Stripe pour le panier de l'utilisateur.
    Retour: {id, url, total, total_minor_units, items}
    """
    reconciled = cart_service.get_reconciled_cart(identity, session=session)
    urls = checkout_urls(base_url)
    request = build_session(
        reconciled,
        urls["success_url"],
        urls["cancel_url"],
        metadata={"user_id": identity.id},
    )
    checkout = stripe_client.create_session(request, client_reference_id=identity.id)
    logger.info(
        "payments.service.start_checkout session_id=%s user_id=%s total_minor_units=%s",
        checkout.id, identity.id, request.total_minor_units,
    )
    summary = reconciled.to_dict()
    return {
        "id": checkout.id,
        "url": checkout.url,
        "total": format_amount(request.total),
        "total_minor_units": request.total_minor_units,
        "items": summary["items"],
    }

def confirm_checkout(
    identity: Identity,
    checkout_session_id: str,
    session: Optional[MutableMapping[str, Any]] = None,
) -> Order:
    """
    Confirmation après paiement (page de succès).
    - Commande déjà créée pour cette session: la renvoie telle quelle (pas de doublon).
    - PaymentNotConfirmedError si payment_status != 'paid'.
    - UnauthorizedError si la session appartient à un autre utilisateur ou ne porte aucun propriétaire.
    """
    existing = orders_repository.find_order_by_checkout_session(checkout_session_id)
    if existing is not None:
        if existing.user_id != identity.id:
            raise UnauthorizedError("Session appartenant à un autre utilisateur")
        return existing

    checkout = stripe_client.get_session(checkout_session_id)
    payment_status = checkout.get("payment_status") or ""
    if payment_status != "paid":
        raise PaymentNotConfirmedError(f"Paiement non confirmé (payment_status={payment_status})")
    meta_user_id = (checkout.get("metadata") or {}).get("user_id") or checkout.get("client_reference_id")
    if meta_user_id != identity.id:
        raise UnauthorizedError("Session sans propriétaire ou appartenant à un autre utilisateur")

    reconciled = cart_service.get_reconciled_cart(identity, session=session)
    return materialize(
        identity.id,
        identity.email,
        reconciled,
        checkout_session_id=checkout_session_id,
        session=session,
    )
