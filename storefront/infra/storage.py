"""
Adaptateur Supabase Storage (API REST /storage/v1) piloté par httpx.
- put_object: envoie un flux d'octets (itérable, non seekable) en transfert chunked, écrase la clé existante (x-upsert).
- open_object: ouvre un flux de lecture sur un objet; le lecteur se ferme à la fin de l'itération ou via close().
- Toute erreur réseau/HTTP est journalisée puis convertie en StorageError.
"""
from typing import Iterable, Iterator, Optional
import logging
import httpx

from storefront.config import SUPABASE_URL, SUPABASE_SERVICE_KEY, INVOICE_BUCKET, STORAGE_TIMEOUT
from storefront.errors import StorageError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# module storefront.infra.storage
def _client() -> httpx.Client:
    return httpx.Client(timeout=STORAGE_TIMEOUT)

def _headers(content_type: Optional[str] = None) -> dict:
    headers = {
        "Authorization": f"Bearer {SUPABASE_SERVICE_KEY}",
        "apikey": SUPABASE_SERVICE_KEY,
    }
    if content_type:
        headers["Content-Type"] = content_type
    return headers

def object_url(key: str, bucket: str = INVOICE_BUCKET) -> str:
    return f"{SUPABASE_URL}/storage/v1/object/{bucket}/{key}"

def authenticated_object_url(key: str, bucket: str = INVOICE_BUCKET) -> str:
    return f"{SUPABASE_URL}/storage/v1/object/authenticated/{bucket}/{key}"

class BlobReader:
    """Flux de lecture ouvert sur un objet du bucket (une seule itération possible)."""

    def __init__(self, key: str, client: httpx.Client, response: httpx.Response):
        self.key = key
        self._client = client
        self._response = response
        self._closed = False

    @property
    def content_length(self) -> Optional[int]:
        raw = self._response.headers.get("content-length")
        return int(raw) if raw and raw.isdigit() else None

    def iter_chunks(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        try:
            for chunk in self._response.iter_bytes(chunk_size):
                yield chunk
        except httpx.HTTPError as exc:
            logger.exception("infra.storage.read failed key=%s", self.key)
            raise StorageError(f"Lecture interrompue: {self.key}") from exc
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._response.close()
        self._client.close()

def put_object(key: str, chunks: Iterable[bytes], content_type: str = "application/pdf", bucket: str = INVOICE_BUCKET) -> str:
    """
    Téléverse un flux d'octets sous `key` (écrase l'objet existant).
    - chunks est consommé une seule fois, au fil de l'envoi (pas de mise en mémoire complète).
    - Retour: la clé écrite.
    """
    headers = _headers(content_type)
    headers["x-upsert"] = "true"
    try:
        with _client() as client:
            resp = client.post(object_url(key, bucket), content=chunks, headers=headers)
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.exception("infra.storage.put_object failed bucket=%s key=%s", bucket, key)
        raise StorageError(f"Téléversement impossible: {key}") from exc
    logger.info("infra.storage.put_object ok bucket=%s key=%s", bucket, key)
    return key

def open_object(key: str, bucket: str = INVOICE_BUCKET) -> BlobReader:
    """
    Ouvre un flux de lecture sur `key`.
    - La réponse HTTP est en mode stream: rien n'est lu tant que le lecteur n'est pas itéré.
    - StorageError si l'objet est absent ou si le service est indisponible.
    """
    client = _client()
    try:
        request = client.build_request("GET", authenticated_object_url(key, bucket), headers=_headers())
        resp = client.send(request, stream=True)
    except httpx.HTTPError as exc:
        client.close()
        logger.exception("infra.storage.open_object failed bucket=%s key=%s", bucket, key)
        raise StorageError(f"Lecture impossible: {key}") from exc
    if resp.status_code >= 400:
        resp.close()
        client.close()
        logger.error("infra.storage.open_object status=%s bucket=%s key=%s", resp.status_code, bucket, key)
        raise StorageError(f"Lecture impossible: {key}")
    return BlobReader(key, client, resp)
