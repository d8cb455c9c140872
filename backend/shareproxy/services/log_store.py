"""Per-request proxy event log, grouped by correlation id."""
from datetime import datetime, timezone
from typing import Optional

from shareproxy.core.cache import LRUCache
from shareproxy.core.config import settings
from shareproxy.schemas.logs import LogEntry


class LogStore:
    """
    Bounded store of proxy events.

    Ids are evicted least-recently-written first once ``max_ids`` is reached,
    and expire ``ttl_seconds`` after their last append.
    """

    def __init__(
        self,
        max_ids: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        **cache_options,
    ):
        self._entries = LRUCache[list[LogEntry]](
            name="proxy_logs",
            max_items=max_ids or settings.log_store_max_ids,
            ttl_seconds=ttl_seconds or settings.log_store_ttl_seconds,
            **cache_options,
        )

    def add(self, log_id: str, message: str) -> LogEntry:
        """Append a message under log_id."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            message=message,
        )

        def append(current: Optional[list[LogEntry]]) -> list[LogEntry]:
            entries = current or []
            entries.append(entry)
            return entries

        self._entries.update(log_id, append)
        return entry

    def get(self, log_id: str) -> list[LogEntry]:
        """Events for log_id in insertion order; empty for unknown ids."""
        return list(self._entries.get(log_id) or [])

    def clear(self) -> None:
        """Drop every id's events."""
        self._entries.clear()

    def stats(self) -> dict:
        return self._entries.stats()
