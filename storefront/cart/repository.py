"""
Accès au panier persisté sur la ligne 'users' (colonne JSON cart).
"""
from typing import Optional
import logging
import storefront.infra.supabase_client as supabase_client
from storefront.errors import RepositoryError
from storefront.models import Cart

logger = logging.getLogger(__name__)

# module storefront.cart.repository
def load_cart(user_id: str) -> Cart:
    """Lit users.cart; un utilisateur sans panier renvoie un panier vide."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("users")
            .select("cart")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as exc:
        logger.exception("cart.repository.load_cart failed user_id=%s", user_id)
        raise RepositoryError("Panier indisponible") from exc
    rows = res.data or []
    doc: Optional[dict] = (rows[0] or {}).get("cart") if rows else None
    return Cart.from_doc(doc)

def save_cart(user_id: str, cart: Cart) -> Cart:
    """Écrit users.cart en une seule mise à jour (atomique au niveau du document utilisateur)."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("users")
            .update({"cart": cart.to_doc()})
            .eq("id", user_id)
            .execute()
        )
    except Exception as exc:
        logger.exception("cart.repository.save_cart failed user_id=%s", user_id)
        raise RepositoryError("Enregistrement du panier impossible") from exc
    return cart
