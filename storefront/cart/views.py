"""
Endpoints API du panier.
- Sécurité: require_identity (Bearer ou cookie sb_access).
- GET réconcilie le panier et persiste les réparations (utilisateur + session).
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from storefront.models import Identity
from storefront.utils.security import require_identity
from . import service

router = APIRouter(prefix="/api/v1/cart", tags=["Panier"])

class CartProductRequest(BaseModel):
    product_id: str = Field(min_length=1)

@router.get("")
def get_cart(request: Request, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """Panier réconcilié: {items: [{product, quantity}], total}."""
    reconciled = service.get_reconciled_cart(identity, session=request.session)
    return service.cart_summary(reconciled)

@router.post("")
def add_product(payload: CartProductRequest, request: Request, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """Ajoute une unité du produit; 404 si le produit n'existe pas."""
    cart = service.add_to_cart(identity, payload.product_id, session=request.session)
    return cart.to_doc()

@router.post("/delete")
def delete_product(payload: CartProductRequest, request: Request, identity: Identity = Depends(require_identity)) -> Dict[str, Any]:
    """Retire la ligne du produit (sans effet si absente)."""
    cart = service.remove_from_cart(identity, payload.product_id, session=request.session)
    return cart.to_doc()
