from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any

import structlog

from menu_api.core.errors import MenuItemNotFound
from menu_api.menu.models import CreateItemInput, MenuItem, MenuItemInput, UpdateItemInput
from menu_api.menu.seed import seed_items
from menu_api.menu.validation import validate_candidate

logger = structlog.get_logger(__name__)


class MenuStore:
    """Ordered in-memory collection of menu items.

    Items keep their insertion position for their whole life. New ids are
    one past the highest id currently stored, so deleting the newest item
    frees its id for the next insert. All reads and mutations go through a
    single lock.
    """

    def __init__(self, items: Iterable[MenuItem] = ()) -> None:
        self._items: list[MenuItem] = list(items)
        ids = [item.id for item in self._items]
        if len(set(ids)) != len(ids):
            raise ValueError("Menu item ids must be unique")
        self._lock = threading.Lock()

    @classmethod
    def seeded(cls) -> MenuStore:
        return cls(seed_items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def list_items(self) -> list[MenuItem]:
        with self._lock:
            return list(self._items)

    def get(self, item_id: int) -> MenuItem:
        with self._lock:
            return self._items[self._index_of(item_id)]

    def validate(self, candidate: Any) -> MenuItemInput:
        return validate_candidate(candidate)

    def insert(self, candidate: Any) -> MenuItem:
        payload = validate_candidate(candidate, CreateItemInput)
        with self._lock:
            item = MenuItem.from_input(self._next_id(), payload)
            self._items.append(item)
        logger.info("menu_item_created", item_id=item.id, name=item.name)
        return item

    def update(self, item_id: int, candidate: Any) -> MenuItem:
        payload = validate_candidate(candidate, UpdateItemInput)
        with self._lock:
            index = self._index_of(item_id)
            item = MenuItem.from_input(item_id, payload)
            self._items[index] = item
        logger.info("menu_item_updated", item_id=item.id, name=item.name)
        return item

    def delete(self, item_id: int) -> MenuItem:
        with self._lock:
            item = self._items.pop(self._index_of(item_id))
        logger.info("menu_item_deleted", item_id=item.id, name=item.name)
        return item

    def _index_of(self, item_id: int) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise MenuItemNotFound(item_id)

    def _next_id(self) -> int:
        return max((item.id for item in self._items), default=0) + 1
