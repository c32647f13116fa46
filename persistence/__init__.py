from __future__ import annotations

from urllib.parse import urlparse

from errors import ConfigurationError

from .app_document import APP_ID_RE, AppDocument, is_valid_app_id
from .disk_store import DiskAppDocumentStore
from .interfaces import AppDocumentStore
from .memory_store import InMemoryAppDocumentStore
from .paths import store_root_from_uri
from .repositories import AsyncAppDocumentRepository, AsyncStoreRepository


def document_store_from_uri(uri: str) -> AppDocumentStore:
    """
    Build (but do not open) the store named by a connection string.

      memory://            -> InMemoryAppDocumentStore
      file:///abs/dir      -> DiskAppDocumentStore
      /abs/dir, rel/dir    -> DiskAppDocumentStore
    """
    scheme = urlparse(uri).scheme.lower()
    if scheme == "memory":
        return InMemoryAppDocumentStore()
    if scheme in ("", "file"):
        return DiskAppDocumentStore(store_root_from_uri(uri))
    raise ConfigurationError(f"Unsupported document store scheme {scheme!r} in DOCSTORE_URI")


__all__ = [
    "APP_ID_RE",
    "AppDocument",
    "AppDocumentStore",
    "AsyncAppDocumentRepository",
    "AsyncStoreRepository",
    "DiskAppDocumentStore",
    "InMemoryAppDocumentStore",
    "document_store_from_uri",
    "is_valid_app_id",
]
