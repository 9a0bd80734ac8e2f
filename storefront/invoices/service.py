from storefront.errors import NotFoundError
from storefront.models import Identity
from storefront.orders import repository as orders_repository
from .delivery import InvoiceDelivery, deliver

def open_invoice(order_id: str, identity: Identity) -> InvoiceDelivery:
    """
    Facture à la demande: charge la commande puis lance le pipeline de livraison.
    - NotFoundError si aucune commande ne porte cet id; UnauthorizedError via le rendu.
    """
    order = orders_repository.get_order_by_id(order_id)
    if order is None:
        raise NotFoundError("Aucune commande trouvée")
    return deliver(order, identity)
