"""
Module 'orders' (feature-first): matérialisation et lecture des commandes.
"""
