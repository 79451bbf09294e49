"""Query Cache - last fetched result per query key

Read-after-write: mutations invalidate the key on success and the next
read refetches. Failed fetches are never cached.
"""
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional

from ..domain.enums import CustomFieldEntityType
from ..utils.logger import get_logger

logger = get_logger(__name__)

RULES_QUERY = ("/api/automation-rules",)


def custom_fields_query(entity_type: CustomFieldEntityType) -> tuple:
    return ("/api/custom-fields", entity_type.value)


class QueryCache:
    """In-process cache keyed by query key"""

    def __init__(self):
        self._entries: Dict[Hashable, Any] = {}

    async def get_or_fetch(self, key: Hashable, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        result = await fetcher()
        self._entries[key] = result
        return result

    def peek(self, key: Hashable) -> Optional[Any]:
        return self._entries.get(key)

    def invalidate(self, key: Hashable) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug(f"Invalidated query {key}")

    def clear(self) -> None:
        self._entries.clear()
