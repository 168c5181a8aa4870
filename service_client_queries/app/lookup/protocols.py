"""
Collaborator contracts consumed by the read-through lookup.
"""

from typing import Optional, Protocol

from ..models import ClientRecord


class CacheStore(Protocol):
    """Fast, disposable tier. Entries may disappear at any time."""

    async def get(self, key: str) -> Optional[ClientRecord]:
        ...

    async def put(self, key: str, record: ClientRecord) -> ClientRecord:
        """Store ``record`` under ``key`` with no expiry."""
        ...


class RecordStore(Protocol):
    """Authoritative tier, point lookups by unique key."""

    async def find_by_key(self, key: str) -> Optional[ClientRecord]:
        ...
