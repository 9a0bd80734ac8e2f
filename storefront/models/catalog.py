"""
Types catalogue.
- Product: lecture seule, tel que renvoyé par la table 'products' (le prix n'est pas validé ici).
- ProductSnapshot: copie par valeur {title, description, price} figée au moment de l'achat.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .money import D, ensure_valid_price

@dataclass(frozen=True)
class Product:
    id: str
    title: str
    description: str
    price: Decimal
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        return cls(
            id=str(row.get("id") or ""),
            title=str(row.get("title") or ""),
            description=str(row.get("description") or ""),
            price=D(row.get("price")),
            image_url=row.get("image_url") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": str(self.price),
            "image_url": self.image_url,
        }

class ProductSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    price: Decimal = Field(ge=0)

    @classmethod
    def of(cls, product: Product) -> "ProductSnapshot":
        """Copie les champs du produit; aucune référence au Product n'est conservée."""
        price = ensure_valid_price(product.price)
        return cls(title=str(product.title), description=str(product.description), price=Decimal(str(price)))

    def to_doc(self) -> Dict[str, Any]:
        return {"title": self.title, "description": self.description, "price": str(self.price)}
