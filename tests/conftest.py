from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from menu_api import main
from menu_api.menu import MenuStore


@pytest.fixture()
def store() -> MenuStore:
    return MenuStore.seeded()


@pytest.fixture()
def client(store: MenuStore):
    main.limiter.reset()
    main.app.dependency_overrides[main.get_store] = lambda: store
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture()
def iced_tea() -> dict[str, Any]:
    return {
        "name": "Iced Tea",
        "description": "Cold brewed tea over ice",
        "price": 3.50,
        "category": "beverage",
        "ingredients": ["tea", "ice"],
    }
