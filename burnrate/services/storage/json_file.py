"""
JSON File Storage

DESIGN DECISION: The whole key-value namespace lives in one JSON document
on disk. It is small (one person's cycles), human-readable, and easy to
back up by copying a single file.

Writes go to a temporary file that then replaces the document, so a crash
mid-write leaves the previous version intact. Transient OS errors on write
are retried a few times before surfacing as StorageError.

There are no durability guarantees beyond that.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from burnrate.config import get_settings
from burnrate.services.storage.interface import StorageError
from burnrate.services.storage.kv_store import KeyValueStorage


logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key-value storage backed by a single JSON document."""

    def __init__(
        self,
        path: Optional[str] = None,
        namespace: Optional[str] = None,
    ):
        settings = get_settings().storage
        super().__init__(namespace or settings.namespace)
        self._path = Path(path or settings.data_path)

    @property
    def path(self) -> Path:
        return self._path

    def _load_document(self) -> dict[str, Any]:
        """Read the whole document; a missing or corrupt file reads as empty."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("storage_document_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(document, dict):
            logger.warning(
                "storage_document_unreadable",
                path=str(self._path),
                error="top-level value is not an object",
            )
            return {}
        return document

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _replace_document(self, document: dict[str, Any]) -> None:
        """Atomically replace the document on disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _save_document(self, document: dict[str, Any]) -> None:
        try:
            self._replace_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def _read(self, key: str) -> Optional[Any]:
        return self._load_document().get(key)

    def _write(self, key: str, value: Any) -> None:
        document = self._load_document()
        document[key] = value
        self._save_document(document)

    def _remove(self, key: str) -> None:
        document = self._load_document()
        if key in document:
            del document[key]
            self._save_document(document)
