import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Depends, HTTPException
from pydantic import BaseModel

from storefront.errors import ShopError
from storefront.models import Identity
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_identity
from . import service as payments_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

class ConfirmRequest(BaseModel):
    session_id: Optional[str] = None

# module storefront.payments.views
@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(request: Request, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """
    Crée une session Checkout Stripe pour le panier de l’utilisateur authentifié.
    - Sécurité: require_identity + rate limit (10 req / 60s)
    - Étapes: réconcilier (et persister) le panier, construire les lignes, créer la session Stripe
    - Retour: {id, url, total, total_minor_units, items}
    - Erreurs: 400 panier vide / prix invalide, 502 échec Stripe
    """
    try:
        return payments_service.start_checkout(identity, str(request.base_url), session=request.session)
    except ShopError as e:
        logger.warning("payments.views.checkout rejected user_id=%s status=%s detail=%s", identity.id, e.status_code, e.detail)
        raise

@router.get("/confirm")
def confirm_checkout_get(session_id: str, request: Request, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """
    Page de succès Stripe: confirme la session et crée la commande (une seule fois par session).
    - 400 si paiement non confirmé, 403 si session d’un autre utilisateur, 400 si panier vide
    """
    order = payments_service.confirm_checkout(identity, session_id, session=request.session)
    return {"status": "ok", "order": order.to_dict()}

@router.post("/confirm")
def confirm_checkout_post(request: Request, payload: Optional[ConfirmRequest] = None, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """
    Variante POST: accepte session_id en query ou JSON body {"session_id": "..."}.
    """
    session_id = request.query_params.get("session_id") or (payload.session_id if payload else None)
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id manquant")
    return confirm_checkout_get(session_id, request, identity)
