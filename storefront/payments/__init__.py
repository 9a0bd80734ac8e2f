"""
Module 'payments' (feature-first): point d'entrée public.
Réunit construction de session, client Stripe et cas d'usage checkout/confirmation.
"""

from .session_builder import LineDescriptor, SessionRequest, build_session
from .stripe_client import CheckoutSession, require_stripe, create_session, get_session
from .service import checkout_urls, start_checkout, confirm_checkout

__all__ = [
    # session
    "LineDescriptor",
    "SessionRequest",
    "build_session",
    # stripe
    "CheckoutSession",
    "require_stripe",
    "create_session",
    "get_session",
    # services
    "checkout_urls",
    "start_checkout",
    "confirm_checkout",
]
