"""
Commande persistée: lignes figées (quantité + ProductSnapshot), jamais modifiée après création.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .catalog import ProductSnapshot
from .money import format_amount

class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int = Field(gt=0)
    product: ProductSnapshot

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    user_id: str
    user_email: str = ""
    lines: Tuple[OrderLine, ...]
    created_at: Optional[datetime] = None
    checkout_session_id: Optional[str] = None

    @property
    def total(self) -> Decimal:
        total = Decimal("0")
        for line in self.lines:
            total += line.subtotal
        return total

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        """Relit une ligne de la table 'orders' (products: [{quantity, product: {title, description, price}}])."""
        return cls(
            id=str(row.get("id")) if row.get("id") is not None else None,
            user_id=str(row.get("user_id") or ""),
            user_email=str(row.get("user_email") or ""),
            lines=tuple(
                OrderLine(quantity=p.get("quantity"), product=ProductSnapshot(**(p.get("product") or {})))
                for p in row.get("products") or []
            ),
            created_at=row.get("created_at"),
            checkout_session_id=row.get("checkout_session_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "user_id": self.user_id,
            "user_email": self.user_email,
            "products": [{"quantity": l.quantity, "product": l.product.to_doc()} for l in self.lines],
        }
        if self.created_at is not None:
            row["created_at"] = self.created_at.isoformat()
        if self.checkout_session_id:
            row["checkout_session_id"] = self.checkout_session_id
        return row

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_row()
        data["id"] = self.id
        data["total"] = format_amount(self.total)
        return data
