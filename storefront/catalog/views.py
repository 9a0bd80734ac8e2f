"""
Endpoints API du catalogue (lecture publique): liste paginée et détail produit.
"""
from typing import Any, Dict

from fastapi import APIRouter, Query

from .service import get_product, get_products_page

router = APIRouter(prefix="/api/v1/products", tags=["Catalogue"])

@router.get("")
def list_products(page: int = Query(1, ge=1)) -> Dict[str, Any]:
    """Liste paginée des produits ({products, pagination})."""
    return get_products_page(page)

@router.get("/{product_id}")
def product_detail(product_id: str) -> Dict[str, Any]:
    """Détail d'un produit; 404 s'il n'existe pas."""
    return get_product(product_id).to_dict()
