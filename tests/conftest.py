import itertools

import pytest


@pytest.fixture
def clock():
    """Strictly increasing ISO timestamps, one second apart."""
    counter = itertools.count()

    def now() -> str:
        return f"2026-01-01T00:00:{next(counter):02d}.000Z"

    return now


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "produtos.db"
