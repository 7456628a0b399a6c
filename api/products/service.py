"""
Product business logic.

Scope:
- field validation shared by create and update (every failing field is reported)
- partial-update merge: fields absent from the request keep their stored value
"""

from __future__ import annotations

import math
from typing import Any

from core.errors import ValidationError

from .repository import ProductStore

_MUTABLE_FIELDS = ("name", "price", "description")


def _parse_price(value: Any) -> float | None:
    # bool is an int subclass; true/false are not prices.
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    # Integers beyond float range raise OverflowError.
    try:
        price = float(value)
    except (ValueError, OverflowError):
        return None
    return price if math.isfinite(price) else None


def validate_fields(*, name: Any, price: Any, description: Any) -> tuple[str, float, str]:
    """
    Return normalized `(name, price, description)` or raise `ValidationError`.
    """
    errors: list[str] = []

    clean_name = name.strip() if isinstance(name, str) else ""
    if not clean_name:
        errors.append("name: must be a non-empty string.")

    clean_price = _parse_price(price)
    if clean_price is None:
        errors.append("price: must be a finite number.")

    if errors:
        raise ValidationError(errors)

    clean_description = "" if description is None else str(description)
    return clean_name, clean_price, clean_description  # type: ignore[return-value]


async def list_all(store: ProductStore) -> list[dict]:
    return await store.list_products()


async def get(store: ProductStore, product_id: int) -> dict:
    return await store.get_product(product_id)


async def create(store: ProductStore, payload: dict[str, Any]) -> dict:
    name, price, description = validate_fields(
        name=payload.get("name"),
        price=payload.get("price"),
        description=payload.get("description"),
    )
    return await store.create_product(name=name, price=price, description=description)


async def update(store: ProductStore, product_id: int, payload: dict[str, Any]) -> dict:
    # Missing ids are reported before any validation.
    current = await store.get_product(product_id)

    merged = {key: current[key] for key in _MUTABLE_FIELDS}
    for key in _MUTABLE_FIELDS:
        if key in payload:
            merged[key] = payload[key]

    name, price, description = validate_fields(**merged)
    return await store.update_product(
        product_id,
        name=name,
        price=price,
        description=description,
    )


async def delete(store: ProductStore, product_id: int) -> dict:
    return await store.delete_product(product_id)
