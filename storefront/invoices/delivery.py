"""
Pipeline de livraison de facture: RENDER -> UPLOAD -> STREAM_BACK -> DONE (FAILED depuis n'importe quelle étape).
- RENDER/UPLOAD: le flux de rendu est consommé directement par le téléversement (clé invoice-<orderId>.pdf).
- STREAM_BACK: un flux de lecture est rouvert sur la même clé et relayé au client.
- Les en-têtes ne sont envoyés qu'une fois le document stocké et relisible; une erreur pendant le relais
  interrompt la connexion (journalisée), sans réécriture d'en-têtes.
- Clé déterministe par commande: une nouvelle demande écrase le même objet.
"""
from enum import Enum
from typing import Dict, Iterator
import logging

from storefront.errors import InvoiceGenerationError, StorageError
from storefront.infra import storage
from storefront.models import Identity, Order
from . import renderer

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

class DeliveryStage(str, Enum):
    RENDER = "RENDER"
    UPLOAD = "UPLOAD"
    STREAM_BACK = "STREAM_BACK"
    DONE = "DONE"
    FAILED = "FAILED"

class InvoiceDelivery:
    """Facture stockée et prête à être relayée (flux de lecture déjà ouvert)."""

    media_type = PDF_MEDIA_TYPE

    def __init__(self, order_id: str, key: str, reader: storage.BlobReader):
        self.order_id = order_id
        self.key = key
        self.stage = DeliveryStage.STREAM_BACK
        self._reader = reader

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Disposition": f"inline; filename={self.key}"}

    def iter_bytes(self) -> Iterator[bytes]:
        try:
            for chunk in self._reader.iter_chunks():
                yield chunk
        except Exception:
            self.stage = DeliveryStage.FAILED
            logger.exception(
                "invoices.delivery aborted order_id=%s stage=%s key=%s",
                self.order_id, DeliveryStage.STREAM_BACK.value, self.key,
            )
            raise
        finally:
            self._reader.close()
        self.stage = DeliveryStage.DONE
        logger.info("invoices.delivery done order_id=%s key=%s", self.order_id, self.key)

    def close(self) -> None:
        """Libère le flux de stockage (déconnexion client ou fin de réponse)."""
        self._reader.close()

# module storefront.invoices.delivery
def deliver(order: Order, requester: Identity) -> InvoiceDelivery:
    """
    Rend, téléverse puis rouvre la facture de `order` pour `requester`.
    - UnauthorizedError si la commande n'appartient pas au demandeur (aucun rendu, aucun octet).
    - InvoiceGenerationError si le rendu ou le téléversement échoue.
    - StorageError si la relecture ne peut pas être ouverte.
    """
    key = renderer.invoice_name(order.id)
    chunks = renderer.render(order, requester)

    try:
        storage.put_object(key, chunks, content_type=PDF_MEDIA_TYPE)
    except InvoiceGenerationError:
        logger.error("invoices.delivery failed order_id=%s stage=%s", order.id, DeliveryStage.RENDER.value)
        raise
    except StorageError as exc:
        logger.error("invoices.delivery failed order_id=%s stage=%s", order.id, DeliveryStage.UPLOAD.value)
        raise InvoiceGenerationError(f"Téléversement de la facture impossible ({key})") from exc

    try:
        reader = storage.open_object(key)
    except StorageError:
        logger.error("invoices.delivery failed order_id=%s stage=%s", order.id, DeliveryStage.STREAM_BACK.value)
        raise
    logger.info("invoices.delivery uploaded order_id=%s key=%s", order.id, key)
    return InvoiceDelivery(order.id, key, reader)
