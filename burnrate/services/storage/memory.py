"""
In-Memory Storage

Keeps every key in a dict for the lifetime of the process. Used by the
tests and by the "memory" backend setting.
"""

import json
from typing import Any, Optional

from burnrate.services.storage.kv_store import DEFAULT_NAMESPACE, KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """
    Key-value storage backed by a dict.

    Values are held as JSON text, so callers never share mutable state
    with the store, exactly as with the file backend.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace)
        self._values: dict[str, str] = {}

    def _read(self, key: str) -> Optional[Any]:
        raw = self._values.get(key)
        return json.loads(raw) if raw is not None else None

    def _write(self, key: str, value: Any) -> None:
        self._values[key] = json.dumps(value)

    def _remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)
