import math
from typing import Any, Dict

from storefront.config import ITEMS_PER_PAGE
from storefront.errors import NotFoundError
from storefront.models import Product
from . import repository

def get_product(product_id: str) -> Product:
    product = repository.find_product_by_id(product_id)
    if product is None:
        raise NotFoundError("Produit introuvable")
    return product

def get_products_page(page: int, per_page: int = ITEMS_PER_PAGE) -> Dict[str, Any]:
    """
    Page de catalogue + bloc de pagination (même calcul que la vitrine d'origine):
    has_next_page si per_page * page < total, last_page = ceil(total / per_page).
    """
    page = max(int(page or 1), 1)
    products, total = repository.list_products(page, per_page)
    return {
        "products": [p.to_dict() for p in products],
        "pagination": {
            "current_page": page,
            "has_next_page": per_page * page < total,
            "has_previous_page": page > 1,
            "next_page": page + 1,
            "previous_page": page - 1,
            "last_page": math.ceil(total / per_page) if per_page else 0,
            "total_items": total,
        },
    }
