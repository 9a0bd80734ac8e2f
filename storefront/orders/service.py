from typing import Any, Dict, List

from storefront.models import Identity
from . import repository

def list_orders(identity: Identity) -> List[Dict[str, Any]]:
    """Commandes de l'utilisateur sous forme JSON (total recalculé depuis les snapshots)."""
    return [order.to_dict() for order in repository.list_user_orders(identity.id)]
