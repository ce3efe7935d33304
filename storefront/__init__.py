# storefront/__init__.py
"""Storefront e-commerce API"""
