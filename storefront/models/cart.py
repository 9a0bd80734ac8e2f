"""
Types panier.
- CartItem / Cart: forme persistée (users.cart et copie de session), une ligne par produit.
- CartLine / ReconciledCart: panier dont chaque référence a été résolue dans le catalogue.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import Product

class CartItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)

class Cart(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartItem, ...] = ()

    @field_validator("items")
    @classmethod
    def _one_line_per_product(cls, items: Tuple[CartItem, ...]) -> Tuple[CartItem, ...]:
        # Agrège les doublons à la position de la première occurrence
        quantities: Dict[str, int] = {}
        for it in items:
            quantities[it.product_id] = quantities.get(it.product_id, 0) + it.quantity
        return tuple(CartItem(product_id=pid, quantity=qty) for pid, qty in quantities.items())

    @classmethod
    def from_doc(cls, doc: Optional[Dict[str, Any]]) -> "Cart":
        """
        Relit un panier stocké {"items": [{"product_id", "quantity"}]}.
        - Ignore les lignes invalides (id vide, quantity <= 0 ou non entière).
        """
        items: List[CartItem] = []
        for raw in (doc or {}).get("items") or []:
            pid = str((raw or {}).get("product_id") or "").strip()
            try:
                qty = int((raw or {}).get("quantity") or 0)
            except (TypeError, ValueError):
                continue
            if not pid or qty <= 0:
                continue
            items.append(CartItem(product_id=pid, quantity=qty))
        return cls(items=tuple(items))

    def to_doc(self) -> Dict[str, Any]:
        return {"items": [{"product_id": it.product_id, "quantity": it.quantity} for it in self.items]}

    def add(self, product_id: str, quantity: int = 1) -> "Cart":
        return Cart(items=self.items + (CartItem(product_id=product_id, quantity=quantity),))

    def remove(self, product_id: str) -> "Cart":
        return Cart(items=tuple(it for it in self.items if it.product_id != product_id))

    def clear(self) -> "Cart":
        return Cart()

    def __len__(self) -> int:
        return len(self.items)

@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

@dataclass(frozen=True)
class ReconciledCart:
    lines: Tuple[CartLine, ...] = ()

    @property
    def cart(self) -> Cart:
        return Cart(items=tuple(CartItem(product_id=l.product.id, quantity=l.quantity) for l in self.lines))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {"product": l.product.to_dict(), "quantity": l.quantity}
                for l in self.lines
            ],
        }
