from __future__ import annotations

import asyncio
from typing import Any, Protocol

from .app_document import AppDocument
from .interfaces import AppDocumentStore


class AsyncAppDocumentRepository(Protocol):
    async def open(self) -> None: ...
    async def close(self) -> None: ...

    async def find_one(self, app_id: str) -> AppDocument | None: ...
    async def insert(self, app_id: str, payload: Any) -> AppDocument: ...
    async def upsert(self, app_id: str, payload: Any) -> AppDocument: ...


class AsyncStoreRepository(AsyncAppDocumentRepository):
    """
    Async wrapper around a blocking AppDocumentStore.
    Uses asyncio.to_thread to avoid blocking the event loop on store I/O.
    """

    def __init__(self, store: AppDocumentStore) -> None:
        self._store = store

    async def open(self) -> None:
        await asyncio.to_thread(self._store.open)

    async def close(self) -> None:
        await asyncio.to_thread(self._store.close)

    async def find_one(self, app_id: str) -> AppDocument | None:
        return await asyncio.to_thread(self._store.find_one, app_id)

    async def insert(self, app_id: str, payload: Any) -> AppDocument:
        return await asyncio.to_thread(self._store.insert, app_id, payload)

    async def upsert(self, app_id: str, payload: Any) -> AppDocument:
        return await asyncio.to_thread(self._store.upsert, app_id, payload)
