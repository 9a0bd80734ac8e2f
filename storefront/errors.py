"""
Taxonomie d'erreurs de la boutique.
- Chaque erreur porte un status_code HTTP et un detail présentable au client.
- Les erreurs de validation (panier vide, prix invalide, propriété, introuvable) sont des 4xx sans retry.
- Les erreurs fournisseur/stockage sont journalisées avec contexte par l'appelant puis exposées en 5xx génériques.
"""
from typing import Optional

class ShopError(Exception):
    status_code = 500
    default_detail = "Erreur interne"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def public_detail(self) -> str:
        """Message renvoyé au client (générique pour les 5xx)."""
        if self.status_code >= 500:
            return self.default_detail
        return self.detail

class NotFoundError(ShopError):
    status_code = 404
    default_detail = "Ressource introuvable"

class UnauthorizedError(ShopError):
    status_code = 403
    default_detail = "Accès interdit"

class EmptyCartError(ShopError):
    status_code = 400
    default_detail = "Panier vide"

class InvalidPriceError(ShopError):
    status_code = 400
    default_detail = "Prix invalide"

class PaymentNotConfirmedError(ShopError):
    status_code = 400
    default_detail = "Paiement non confirmé"

class PaymentProviderError(ShopError):
    status_code = 502
    default_detail = "Erreur du prestataire de paiement"

class InvoiceGenerationError(ShopError):
    status_code = 500
    default_detail = "Impossible de générer la facture"

class StorageError(ShopError):
    status_code = 500
    default_detail = "Erreur de stockage"

class RepositoryError(ShopError):
    status_code = 500
    default_detail = "Erreur d'accès aux données"
