from __future__ import annotations

from typing import Any, Protocol

from .app_document import AppDocument


class AppDocumentStore(Protocol):
    """
    Minimal document-store interface: one AppDocument per unique appId.

    Implementations raise StorageUnavailable for any backend fault.
    """

    def open(self) -> None:
        """Acquire the backing resource. Called once at process start."""
        ...

    def close(self) -> None:
        ...

    def find_one(self, app_id: str) -> AppDocument | None:
        ...

    def insert(self, app_id: str, payload: Any) -> AppDocument:
        """Create a document. Raises DuplicateAppId if one already exists."""
        ...

    def upsert(self, app_id: str, payload: Any) -> AppDocument:
        """Create the document, or replace its payload wholesale."""
        ...
