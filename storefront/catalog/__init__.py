"""
Module 'catalog' (feature-first): lecture des produits depuis Supabase.
"""
