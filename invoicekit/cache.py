"""Cached views keyed by path.

Mutations never write to the cache; they only invalidate the listing
they affect so the next read goes back to the database.
"""

import logging
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class ViewCache(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def invalidate(self, key: str) -> None: ...


class InMemoryViewCache:
    def __init__(self) -> None:
        self._views: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._views.get(key)

    def set(self, key: str, value: Any) -> None:
        self._views[key] = value

    def invalidate(self, key: str) -> None:
        self._views.pop(key, None)
        logger.info("view invalidated", extra={"view": key})

    def __contains__(self, key: str) -> bool:
        return key in self._views
