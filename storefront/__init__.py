"""
Boutique: panier, paiement Stripe, commandes et factures PDF.
"""
