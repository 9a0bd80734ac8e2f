"""
Accès lecture à la table 'products' (le catalogue est administré ailleurs; aucune écriture ici).
- Un id mal formé (uuid invalide, code Postgres 22P02) est traité comme un produit absent.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import storefront.infra.supabase_client as supabase_client
from postgrest.exceptions import APIError
from storefront.errors import RepositoryError
from storefront.models import Product

logger = logging.getLogger(__name__)

# module storefront.catalog.repository
def find_product_by_id(product_id: str) -> Optional[Product]:
    """
    Lookup ponctuel par id.
    - Retourne None si le produit n'existe plus (référence pendante) ou si l'id est mal formé.
    - RepositoryError si Supabase est indisponible.
    """
    if not product_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
    except APIError as exc:
        if supabase_client.api_error_code(exc) == supabase_client.INVALID_TEXT_REPRESENTATION:
            return None
        logger.exception("catalog.repository.find_product_by_id failed product_id=%s", product_id)
        raise RepositoryError("Catalogue indisponible") from exc
    except Exception as exc:
        logger.exception("catalog.repository.find_product_by_id failed product_id=%s", product_id)
        raise RepositoryError("Catalogue indisponible") from exc
    rows = res.data or []
    return Product.from_row(rows[0]) if rows else None

def list_products(page: int, per_page: int) -> Tuple[List[Product], int]:
    """
    Page de produits (ordre d'insertion) + nombre total de produits.
    - page commence à 1.
    """
    start = (max(page, 1) - 1) * per_page
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select("*", count="exact")
            .order("created_at", desc=False)
            .range(start, start + per_page - 1)
            .execute()
        )
    except Exception as exc:
        logger.exception("catalog.repository.list_products failed page=%s", page)
        raise RepositoryError("Catalogue indisponible") from exc
    rows: List[Dict[str, Any]] = res.data or []
    total = res.count if res.count is not None else len(rows)
    return [Product.from_row(r) for r in rows], total
