"""Services package."""

from burnrate.services.storage import (
    AuditStorageInterface,
    CycleStorageInterface,
    HistoryStorageInterface,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CycleStorageInterface",
    "HistoryStorageInterface",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "NotFoundError",
    "StorageError",
]
