# Card store adapters
from .json_store import JsonCardStore
from .memory_store import MemoryCardStore

__all__ = ["JsonCardStore", "MemoryCardStore"]
