"""
Accès aux données de la table 'orders'.
- Écritures via le client service-role; lectures filtrées par id / user_id / checkout_session_id.
- Un id mal formé (uuid invalide, code Postgres 22P02) est traité comme « introuvable ».
"""
from typing import Any, Dict, List, Optional
import logging
import storefront.infra.supabase_client as supabase_client
from postgrest.exceptions import APIError
from storefront.errors import RepositoryError
from storefront.models import Order

logger = logging.getLogger(__name__)

# module storefront.orders.repository
def insert_order(order: Order) -> Order:
    """Insère la commande et renvoie la version persistée (avec id et created_at)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .insert(order.to_row())
            .execute()
        )
    except Exception as exc:
        logger.exception("orders.repository.insert_order failed user_id=%s", order.user_id)
        raise RepositoryError("Enregistrement de la commande impossible") from exc
    rows: List[Dict[str, Any]] = res.data or []
    if not rows:
        raise RepositoryError("Enregistrement de la commande impossible")
    return Order.from_row(rows[0])

def _select_one(column: str, value: str) -> Optional[Order]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
    except APIError as exc:
        if supabase_client.api_error_code(exc) == supabase_client.INVALID_TEXT_REPRESENTATION:
            return None
        logger.exception("orders.repository select failed %s=%s", column, value)
        raise RepositoryError("Commandes indisponibles") from exc
    except Exception as exc:
        logger.exception("orders.repository select failed %s=%s", column, value)
        raise RepositoryError("Commandes indisponibles") from exc
    rows = res.data or []
    return Order.from_row(rows[0]) if rows else None

def get_order_by_id(order_id: str) -> Optional[Order]:
    if not order_id:
        return None
    return _select_one("id", str(order_id))

def find_order_by_checkout_session(checkout_session_id: str) -> Optional[Order]:
    if not checkout_session_id:
        return None
    return _select_one("checkout_session_id", checkout_session_id)

def list_user_orders(user_id: str) -> List[Order]:
    """Commandes de l'utilisateur, les plus récentes d'abord."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        logger.exception("orders.repository.list_user_orders failed user_id=%s", user_id)
        raise RepositoryError("Commandes indisponibles") from exc
    return [Order.from_row(r) for r in res.data or []]
