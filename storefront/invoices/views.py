"""
Endpoint facture: GET /api/v1/orders/{order_id}/invoice
- Sécurité: require_identity; la commande doit appartenir à l'utilisateur (403 sinon, 404 si absente).
- Réponse: application/pdf, Content-Disposition inline; filename=invoice-<orderId>.pdf, relayée en streaming depuis le stockage.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from storefront.models import Identity
from storefront.utils.security import require_identity
from .service import open_invoice

router = APIRouter(prefix="/api/v1/orders", tags=["Factures"])

@router.get("/{order_id}/invoice")
def get_invoice(order_id: str, identity: Identity = Depends(require_identity)):
    delivery = open_invoice(order_id, identity)
    return StreamingResponse(
        delivery.iter_bytes(),
        media_type=delivery.media_type,
        headers=delivery.headers,
        background=BackgroundTask(delivery.close),
    )
