"""
Product dependencies for FastAPI routes.
"""

from __future__ import annotations

from fastapi import Request

from .repository import ProductStore


def get_store(request: Request) -> ProductStore:
    store = getattr(request.app.state, "product_store", None)
    if store is None:
        raise RuntimeError("Product store is not initialized. It is created in the app lifespan.")
    return store
