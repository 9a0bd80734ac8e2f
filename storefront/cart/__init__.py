"""
Module 'cart' (feature-first): panier persistant, réconciliation avec le catalogue.
"""
