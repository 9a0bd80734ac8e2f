"""
Module 'invoices' (feature-first): rendu PDF, dépôt en stockage objet, relecture en flux.
"""
