"""
Persistence adapters.

Today everything lives in one JSON document (see json_storage). Services
depend on the JSONStore instance they are handed rather than touching the
file themselves.
"""

from .json_storage import JSONStore, StorageError, StoreClosedError, StoreError

__all__ = ["JSONStore", "StorageError", "StoreClosedError", "StoreError"]
