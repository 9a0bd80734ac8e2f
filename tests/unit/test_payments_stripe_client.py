import pytest
from decimal import Decimal
from unittest.mock import MagicMock
import stripe

from storefront.errors import PaymentProviderError
from storefront.models import CartLine, Product, ReconciledCart
from storefront.payments import stripe_client
from storefront.payments.session_builder import build_session


@pytest.fixture
def session_request():
    line = CartLine(product=Product(id="A", title="Mug", description="", price=Decimal("10.00")), quantity=2)
    return build_session(ReconciledCart(lines=(line,)), "https://shop/ok", "https://shop/cancel", metadata={"user_id": "u1"})


def test_require_stripe_without_key(monkeypatch):
    monkeypatch.setattr("storefront.payments.stripe_client.STRIPE_SECRET_KEY", "")
    with pytest.raises(PaymentProviderError):
        stripe_client.require_stripe()


def test_require_stripe_keeps_http_client(monkeypatch):
    monkeypatch.setattr("storefront.payments.stripe_client.STRIPE_SECRET_KEY", "sk_test_123")
    before = stripe.default_http_client
    stripe_client.require_stripe()
    stripe_client.require_stripe()
    assert stripe.default_http_client is before
    assert isinstance(before, stripe.RequestsClient)
    assert stripe.api_key == "sk_test_123"


def test_create_session_single_attempt(monkeypatch, session_request):
    monkeypatch.setattr("storefront.payments.stripe_client.STRIPE_SECRET_KEY", "sk_test_123")
    create = MagicMock(return_value=MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1"))
    monkeypatch.setattr(stripe.checkout.Session, "create", create)

    checkout = stripe_client.create_session(session_request, client_reference_id="u1")

    assert checkout == stripe_client.CheckoutSession(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1")
    assert stripe.max_network_retries == 0
    kwargs = create.call_args.kwargs
    assert kwargs["mode"] == "payment"
    assert kwargs["client_reference_id"] == "u1"
    assert kwargs["metadata"] == {"user_id": "u1"}
    assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 1000


def test_create_session_provider_error(monkeypatch, session_request):
    monkeypatch.setattr("storefront.payments.stripe_client.STRIPE_SECRET_KEY", "sk_test_123")

    def _fail(**kwargs):
        raise stripe.StripeError("card network down")

    monkeypatch.setattr(stripe.checkout.Session, "create", _fail)
    with pytest.raises(PaymentProviderError) as exc:
        stripe_client.create_session(session_request)
    assert exc.value.status_code == 502


def test_get_session_returns_dict(monkeypatch):
    monkeypatch.setattr("storefront.payments.stripe_client.STRIPE_SECRET_KEY", "sk_test_123")
    fake = MagicMock()
    fake.to_dict.return_value = {"id": "cs_1", "payment_status": "paid"}
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", lambda sid: fake)
    assert stripe_client.get_session("cs_1") == {"id": "cs_1", "payment_status": "paid"}
