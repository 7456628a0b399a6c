"""
Pydantic schemas for product endpoints.

Request bodies are loosely typed on purpose: field rules live in
`service.validate_fields` so one 400 response can list every bad field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ProductCreateRequest(BaseModel):
    name: Any = None
    price: Any = None
    description: Any = None


class ProductUpdateRequest(BaseModel):
    name: Any = None
    price: Any = None
    description: Any = None


class ProductResponse(BaseModel):
    id: int
    name: str
    price: float
    description: str = ""
    updated_at: str | None = None


class DeleteProductResponse(BaseModel):
    deleted: bool = True
    produto: ProductResponse
