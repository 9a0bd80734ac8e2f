from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from storefront.models import Identity
from storefront.utils.security import require_identity
from .service import list_orders

router = APIRouter(prefix="/api/v1/orders", tags=["Commandes"])

@router.get("", response_model=List[Dict[str, Any]])
def my_orders(identity: Identity = Depends(require_identity)):
    """Commandes de l'utilisateur (les plus récentes d'abord), total recalculé depuis les snapshots."""
    return list_orders(identity)
