"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
- Un seul essai par appel (max_network_retries=0), délai réseau STRIPE_TIMEOUT.
- Toute erreur Stripe est journalisée puis convertie en PaymentProviderError.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import stripe

from storefront.config import STRIPE_SECRET_KEY, STRIPE_TIMEOUT
from storefront.errors import PaymentProviderError
from .session_builder import SessionRequest

logger = logging.getLogger(__name__)

# Configuration globale du SDK posée une seule fois, à l'import: un seul essai, délai borné
stripe.max_network_retries = 0
stripe.default_http_client = stripe.RequestsClient(timeout=STRIPE_TIMEOUT)

@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: Optional[str] = None

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - PaymentProviderError si STRIPE_SECRET_KEY est absente.
    """
    if not STRIPE_SECRET_KEY:
        raise PaymentProviderError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def create_session(
    request: SessionRequest,
    *,
    client_reference_id: Optional[str] = None,
) -> CheckoutSession:
    """
    Crée une session Stripe Checkout (mode paiement, carte).
    Retour: CheckoutSession(id, url)
    """
    require_stripe()
    try:
        session = stripe.checkout.Session.create(
            line_items=request.stripe_line_items(),
            mode="payment",
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            metadata=dict(request.metadata),
            client_reference_id=client_reference_id,
            payment_method_types=["card"],
        )
    except stripe.StripeError as exc:
        logger.exception("payments.stripe_client.create_session failed client_reference_id=%s", client_reference_id)
        raise PaymentProviderError(str(exc)) from exc
    return CheckoutSession(id=session.id, url=getattr(session, "url", None))

def get_session(session_id: str) -> Dict[str, Any]:
    """Lit une session Checkout (statut de paiement, métadonnées)."""
    require_stripe()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as exc:
        logger.exception("payments.stripe_client.get_session failed session_id=%s", session_id)
        raise PaymentProviderError(str(exc)) from exc
    return session.to_dict() if hasattr(session, "to_dict") else dict(session)
