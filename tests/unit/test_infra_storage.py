import pytest
import httpx

from storefront.errors import StorageError
from storefront.infra import storage


def test_put_object_streams_chunks_with_upsert(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.read()
        return httpx.Response(200, json={"Key": "invoices/a.pdf"})

    monkeypatch.setattr(storage, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(storage, "_client", lambda: httpx.Client(transport=httpx.MockTransport(handler)))

    key = storage.put_object("a.pdf", iter([b"%PDF-", b"1.4"]))

    assert key == "a.pdf"
    assert seen["url"] == "https://project.supabase.co/storage/v1/object/invoices/a.pdf"
    assert seen["headers"]["x-upsert"] == "true"
    assert seen["headers"]["content-type"] == "application/pdf"
    assert seen["body"] == b"%PDF-1.4"


def test_put_object_http_error(bucket):
    bucket.fail_put = True
    with pytest.raises(StorageError):
        storage.put_object("a.pdf", iter([b"x"]))


def test_put_object_network_error(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    monkeypatch.setattr(storage, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(storage, "_client", lambda: httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(StorageError):
        storage.put_object("a.pdf", iter([b"x"]))


def test_open_object_reads_back_in_chunks(bucket):
    bucket.objects["a.pdf"] = b"0123456789"
    reader = storage.open_object("a.pdf")
    assert reader.content_length == 10
    assert list(reader.iter_chunks(chunk_size=4)) == [b"0123", b"4567", b"89"]
    reader.close()


def test_open_missing_object(bucket):
    with pytest.raises(StorageError):
        storage.open_object("missing.pdf")
    assert bucket.calls == [("get", "missing.pdf")]
