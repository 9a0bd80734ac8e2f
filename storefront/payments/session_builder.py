"""
Construction de la requête de session Checkout à partir d'un panier réconcilié (pas de Stripe, pas de DB).
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.config import CURRENCY
from storefront.errors import EmptyCartError
from storefront.models import ReconciledCart, ensure_valid_price, to_minor_units

@dataclass(frozen=True)
class LineDescriptor:
    name: str
    description: str
    unit_amount: int  # unités mineures (centimes)
    currency: str
    quantity: int

    def to_stripe(self) -> Dict[str, Any]:
        product_data: Dict[str, Any] = {"name": self.name or "Article"}
        # Stripe refuse une description vide
        if self.description:
            product_data["description"] = self.description
        return {
            "quantity": self.quantity,
            "price_data": {
                "currency": self.currency,
                "unit_amount": self.unit_amount,
                "product_data": product_data,
            },
        }

@dataclass(frozen=True)
class SessionRequest:
    line_items: Tuple[LineDescriptor, ...]
    total: Decimal
    success_url: str
    cancel_url: str
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def total_minor_units(self) -> int:
        return sum(li.unit_amount * li.quantity for li in self.line_items)

    def stripe_line_items(self) -> List[Dict[str, Any]]:
        return [li.to_stripe() for li in self.line_items]

# module storefront.payments.session_builder
def build_session(
    reconciled: ReconciledCart,
    success_url: str,
    cancel_url: str,
    currency: str = CURRENCY,
    metadata: Optional[Dict[str, str]] = None,
) -> SessionRequest:
    """
    Une ligne Stripe par ligne de panier + total décimal calculé dans la même passe.
    - EmptyCartError si le panier n'a aucune ligne.
    - InvalidPriceError si un prix est négatif ou non fini.
    """
    if reconciled.is_empty:
        raise EmptyCartError("Impossible de créer une session de paiement sur un panier vide")
    descriptors: List[LineDescriptor] = []
    total = Decimal("0")
    for line in reconciled.lines:
        price = ensure_valid_price(line.product.price)
        total += price * line.quantity
        descriptors.append(LineDescriptor(
            name=line.product.title,
            description=line.product.description,
            unit_amount=to_minor_units(price),
            currency=currency,
            quantity=line.quantity,
        ))
    return SessionRequest(
        line_items=tuple(descriptors),
        total=total,
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=dict(metadata or {}),
    )
