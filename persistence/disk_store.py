from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from errors import DuplicateAppId, InvalidIdentifier, StorageUnavailable
from json_store import atomic_write_json, exclusive_create_json, read_json

from .app_document import AppDocument, is_valid_app_id
from .interfaces import AppDocumentStore
from .locks import DOCUMENT_LOCKS
from .paths import document_path, ensure_dir

logger = logging.getLogger(__name__)


class DiskAppDocumentStore(AppDocumentStore):
    """
    Stores each AppDocument as its own JSON file:

    - <root>/<appId>.json

    - Writes are atomic (temp file + replace).
    - Inserts hard-link the temp file into place, which fails when the file
      already exists; that is the uniqueness constraint on appId.
    - A corrupt or unreadable file is a storage fault, never an empty document.
    """

    def __init__(self, root: Path):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def open(self) -> None:
        try:
            ensure_dir(self._root)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create document store at {self._root}") from e
        if not os.access(self._root, os.R_OK | os.W_OK):
            raise StorageUnavailable(f"Document store at {self._root} is not readable and writable")
        logger.info("Disk document store ready at %s", self._root)

    def close(self) -> None:
        # Nothing held open between requests.
        pass

    def _path(self, app_id: str) -> Path:
        if not is_valid_app_id(app_id):
            raise InvalidIdentifier(app_id)
        return document_path(self._root, app_id)

    def find_one(self, app_id: str) -> AppDocument | None:
        path = self._path(app_id)
        with DOCUMENT_LOCKS.lock_for(path):
            try:
                raw = read_json(path)
            except (OSError, ValueError, RecursionError) as e:
                raise StorageUnavailable(f"Cannot read document {path.name}") from e
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise StorageUnavailable(f"Document {path.name} is not a JSON object")
        try:
            return AppDocument.from_disk_doc(raw)
        except ValueError as e:
            raise StorageUnavailable(f"Document {path.name} has an invalid layout") from e

    def insert(self, app_id: str, payload: Any) -> AppDocument:
        path = self._path(app_id)
        doc = AppDocument.new(app_id, payload)
        with DOCUMENT_LOCKS.lock_for(path):
            try:
                exclusive_create_json(path, doc.to_disk_doc())
            except FileExistsError as e:
                raise DuplicateAppId(app_id) from e
            except (OSError, TypeError, ValueError, RecursionError) as e:
                raise StorageUnavailable(f"Cannot create document {path.name}") from e
        return doc

    def upsert(self, app_id: str, payload: Any) -> AppDocument:
        path = self._path(app_id)
        with DOCUMENT_LOCKS.lock_for(path):
            created_at = None
            try:
                existing = read_json(path)
            except ValueError:
                # Full replace: a damaged record is simply overwritten.
                logger.warning("Overwriting unreadable document %s", path.name)
                existing = None
            except OSError as e:
                raise StorageUnavailable(f"Cannot read document {path.name}") from e
            if isinstance(existing, dict):
                try:
                    created_at = AppDocument.from_disk_doc(existing).created_at
                except ValueError:
                    created_at = None

            doc = AppDocument.new(app_id, payload, created_at=created_at)
            try:
                atomic_write_json(path, doc.to_disk_doc())
            except (OSError, TypeError, ValueError, RecursionError) as e:
                raise StorageUnavailable(f"Cannot write document {path.name}") from e
        return doc
