"""Read-through lookup orchestration."""

from .context import ExecutionContext
from .protocols import CacheStore, RecordStore
from .read_through import ReadThroughLookup

__all__ = ["CacheStore", "ExecutionContext", "ReadThroughLookup", "RecordStore"]
