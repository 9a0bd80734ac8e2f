"""
Réconciliation panier / catalogue (logique pure, aucune écriture).
"""
from typing import Callable, List, Optional, Tuple

from storefront.models import Cart, CartLine, Product, ReconciledCart

CatalogLookup = Callable[[str], Optional[Product]]

# module storefront.cart.reconciler
def reconcile(cart: Cart, catalog_lookup: CatalogLookup) -> Tuple[ReconciledCart, bool]:
    """
    Résout chaque référence produit via catalog_lookup(id).
    - Conserve les lignes résolues dans leur ordre relatif d'origine.
    - repaired vaut True si au moins une ligne pendante (produit supprimé) a été retirée.
    - Panier vide -> (panier vide, False).
    Quand repaired est True, l'appelant doit persister reconciled.cart (utilisateur + session)
    avant tout calcul de total.
    """
    lines: List[CartLine] = []
    repaired = False
    for item in cart.items:
        product = catalog_lookup(item.product_id)
        if product is None:
            repaired = True
            continue
        lines.append(CartLine(product=product, quantity=item.quantity))
    return ReconciledCart(lines=tuple(lines)), repaired
