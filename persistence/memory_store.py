from __future__ import annotations

import copy
import threading
from typing import Any

from errors import DuplicateAppId, InvalidIdentifier

from .app_document import AppDocument, is_valid_app_id
from .interfaces import AppDocumentStore


class InMemoryAppDocumentStore(AppDocumentStore):
    """
    Process-local store selected with `memory://`. Contents vanish on restart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._docs: dict[str, dict[str, Any]] = {}

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        with self._lock:
            return len(self._docs)

    def find_one(self, app_id: str) -> AppDocument | None:
        with self._lock:
            rec = self._docs.get(app_id)
            if rec is None:
                return None
            return AppDocument.from_disk_doc(copy.deepcopy(rec))

    def insert(self, app_id: str, payload: Any) -> AppDocument:
        if not is_valid_app_id(app_id):
            raise InvalidIdentifier(app_id)
        doc = AppDocument.new(app_id, copy.deepcopy(payload))
        with self._lock:
            if app_id in self._docs:
                raise DuplicateAppId(app_id)
            self._docs[app_id] = doc.to_disk_doc()
        return doc

    def upsert(self, app_id: str, payload: Any) -> AppDocument:
        if not is_valid_app_id(app_id):
            raise InvalidIdentifier(app_id)
        with self._lock:
            existing = self._docs.get(app_id)
            created_at = AppDocument.from_disk_doc(existing).created_at if existing is not None else None
            doc = AppDocument.new(app_id, copy.deepcopy(payload), created_at=created_at)
            self._docs[app_id] = doc.to_disk_doc()
        return doc
