"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Both backends share the key-value record handling in kv_store.
"""

from burnrate.services.storage.interface import (
    AuditStorageInterface,
    CycleStorageInterface,
    HistoryStorageInterface,
    NotFoundError,
    StorageError,
)
from burnrate.services.storage.kv_store import DEFAULT_NAMESPACE, KeyValueStorage
from burnrate.services.storage.memory import InMemoryStorage
from burnrate.services.storage.json_file import JsonFileStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "CycleStorageInterface",
    "HistoryStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # Implementations
    "DEFAULT_NAMESPACE",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
]
