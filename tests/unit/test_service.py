"""
Unit tests for api/products/service.py — field rules and partial-update merge.
"""

import asyncio

import pytest

from core.db import Database
from core.errors import NotFoundError, ValidationError
from products import service
from products.repository import ProductStore


def _run(coro):
    return asyncio.run(coro)


@pytest.fixture
def store(db_path, clock):
    s = ProductStore(Database(db_path), clock=clock, seed_on_empty=False)
    _run(s.initialize())
    return s


class TestValidateFields:
    """validate_fields() normalizes values or reports every bad field."""

    def test_trims_name(self):
        assert service.validate_fields(name="  Widget ", price=1, description=None) == ("Widget", 1.0, "")

    def test_accepts_numeric_string_price(self):
        _, price, _ = service.validate_fields(name="w", price=" 12.5 ", description="")
        assert price == 12.5

    @pytest.mark.parametrize(
        "price",
        ["abc", "", "  ", None, True, float("nan"), float("inf"), "1e400", 10**400, [1]],
    )
    def test_rejects_bad_price(self, price):
        with pytest.raises(ValidationError) as exc:
            service.validate_fields(name="w", price=price, description="")
        assert exc.value.errors == ["price: must be a finite number."]

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_rejects_bad_name(self, name):
        with pytest.raises(ValidationError) as exc:
            service.validate_fields(name=name, price=1.0, description="")
        assert exc.value.errors == ["name: must be a non-empty string."]

    def test_reports_every_invalid_field(self):
        with pytest.raises(ValidationError) as exc:
            service.validate_fields(name=" ", price="x", description="")
        assert len(exc.value.errors) == 2
        assert exc.value.errors[0].startswith("name")
        assert exc.value.errors[1].startswith("price")

    def test_description_is_coerced_to_string(self):
        _, _, description = service.validate_fields(name="w", price=1.0, description=123)
        assert description == "123"


class TestCreate:
    def test_create_persists_normalized_values(self, store):
        created = _run(service.create(store, {"name": " Widget ", "price": "9.99"}))
        assert created["name"] == "Widget"
        assert created["price"] == 9.99
        assert created["description"] == ""

    def test_invalid_create_writes_nothing(self, store):
        with pytest.raises(ValidationError):
            _run(service.create(store, {"name": "", "price": "nope"}))
        assert _run(store.count()) == 0


class TestUpdate:
    def test_price_only_update_keeps_other_fields(self, store):
        created = _run(service.create(store, {"name": "Widget", "price": 9.99, "description": "blue"}))
        updated = _run(service.update(store, created["id"], {"price": 12.5}))
        assert updated["name"] == "Widget"
        assert updated["description"] == "blue"
        assert updated["price"] == 12.5
        assert updated["updated_at"] > created["updated_at"]

    def test_merged_values_are_revalidated(self, store):
        created = _run(service.create(store, {"name": "Widget", "price": 9.99}))
        with pytest.raises(ValidationError) as exc:
            _run(service.update(store, created["id"], {"name": "   "}))
        assert exc.value.errors == ["name: must be a non-empty string."]
        assert _run(store.get_product(created["id"]))["name"] == "Widget"

    def test_empty_update_only_refreshes_timestamp(self, store):
        created = _run(service.create(store, {"name": "Widget", "price": 9.99, "description": "blue"}))
        updated = _run(service.update(store, created["id"], {}))
        assert {k: updated[k] for k in ("id", "name", "price", "description")} == {
            "id": created["id"],
            "name": "Widget",
            "price": 9.99,
            "description": "blue",
        }
        assert updated["updated_at"] > created["updated_at"]

    def test_missing_id_is_not_found_before_validation(self, store):
        with pytest.raises(NotFoundError):
            _run(service.update(store, 99, {"price": "not a number"}))


class TestWidgetScenario:
    """create → update → delete → get on an empty store."""

    def test_full_lifecycle(self, store):
        created = _run(service.create(store, {"name": "Widget", "price": 9.99}))
        assert created == {
            "id": 1,
            "name": "Widget",
            "price": 9.99,
            "description": "",
            "updated_at": created["updated_at"],
        }

        updated = _run(service.update(store, 1, {"price": 12.5}))
        assert updated["price"] == 12.5
        assert updated["updated_at"] > created["updated_at"]

        deleted = _run(service.delete(store, 1))
        assert deleted == updated

        with pytest.raises(NotFoundError):
            _run(service.get(store, 1))
