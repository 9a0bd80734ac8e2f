import pytest
from unittest.mock import MagicMock
from postgrest.exceptions import APIError

from storefront.errors import RepositoryError
from storefront.orders import repository

ROW = {
    "id": "o1",
    "user_id": "u1",
    "user_email": "u1@example.com",
    "products": [{"quantity": 1, "product": {"title": "A", "description": "", "price": "10.00"}}],
    "created_at": "2024-05-01T10:00:00+00:00",
    "checkout_session_id": "cs_1",
}


def _client_returning(data=None, exc=None):
    client = MagicMock()
    query = client.table.return_value
    for name in ("select", "eq", "limit", "order", "insert"):
        getattr(query, name).return_value = query
    if exc is not None:
        query.execute.side_effect = exc
    else:
        query.execute.return_value = MagicMock(data=data)
    return client


def test_get_order_by_id(monkeypatch):
    client = _client_returning([ROW])
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    order = repository.get_order_by_id("o1")
    assert order.id == "o1"
    client.table.assert_called_with("orders")


def test_malformed_id_is_not_found(monkeypatch):
    client = _client_returning(exc=APIError({"code": "22P02", "message": "invalid input syntax for type uuid"}))
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    assert repository.get_order_by_id("not-a-uuid") is None


def test_other_api_error_is_repository_error(monkeypatch):
    client = _client_returning(exc=APIError({"code": "PGRST301", "message": "jwt expired"}))
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    with pytest.raises(RepositoryError):
        repository.find_order_by_checkout_session("cs_1")


def test_insert_without_returned_row(monkeypatch):
    client = _client_returning([])
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    order = repository.Order.from_row(ROW)
    with pytest.raises(RepositoryError):
        repository.insert_order(order)


def test_list_user_orders_most_recent_first(monkeypatch):
    client = _client_returning([ROW])
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: client)
    orders = repository.list_user_orders("u1")
    assert [o.id for o in orders] == ["o1"]
    client.table.return_value.order.assert_called_with("created_at", desc=True)
