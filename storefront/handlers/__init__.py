# storefront/handlers/__init__.py
"""HTTP routers"""
from .auth_handlers import router as auth_router
from .inventory_handlers import router as inventory_router
from .order_handlers import router as order_router

__all__ = [
    'auth_router',
    'inventory_router',
    'order_router'
]
