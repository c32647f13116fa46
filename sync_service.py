from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import BaseModel

from errors import DuplicateAppId, EmptyBody, InvalidIdentifier, PayloadTooDeep, StorageUnavailable
from persistence import AsyncAppDocumentRepository, is_valid_app_id
from templates import initial_payload_for_app

logger = logging.getLogger(__name__)

LEGACY_APP_ID = "pkgen-legacy"
PONG = "pong"
# Stored documents are encoded recursively; keep well inside the interpreter stack.
MAX_PAYLOAD_DEPTH = 128


class SaveAcknowledgement(BaseModel):
    success: bool = True
    # Milliseconds since the epoch at which the write was accepted.
    timestamp: int


def _now_ms() -> int:
    return int(time.time() * 1000)


def validate_app_id(app_id: Any) -> str:
    if not is_valid_app_id(app_id):
        raise InvalidIdentifier(app_id)
    return app_id


def payload_depth(payload: Any, *, stop_after: int | None = None) -> int:
    """
    Deepest container nesting in a JSON value (`[]` is 1, a scalar is 0).

    Walks iteratively so hostile inputs can't exhaust the interpreter stack.
    Returns early once `stop_after` is exceeded.
    """
    deepest = 0
    stack: list[tuple[Any, int]] = [(payload, 1)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        deepest = max(deepest, level)
        if stop_after is not None and deepest > stop_after:
            break
        stack.extend((child, level + 1) for child in children)
    return deepest


class DocumentSyncService:
    """
    Read/replace operations on per-application documents.

    Stateless apart from the repository handle it is given; every operation
    is a single store call (plus one re-read when a lazy init loses a race).
    """

    def __init__(self, repository: AsyncAppDocumentRepository, *, log_requests: bool = False):
        self._repo = repository
        self._log_requests = log_requests

    async def read_or_init(self, app_id: str) -> Any:
        validate_app_id(app_id)
        try:
            doc = await self._repo.find_one(app_id)
            if doc is not None:
                if self._log_requests:
                    logger.info("READ %s", app_id)
                return doc.payload

            logger.info("Initializing new database for appId: %s", app_id)
            initial = initial_payload_for_app(app_id)
            try:
                await self._repo.insert(app_id, initial)
            except DuplicateAppId:
                # A concurrent reader created it first; serve what it stored.
                logger.info("Lazy init raced for appId %s; re-reading", app_id)
                doc = await self._repo.find_one(app_id)
                if doc is None:
                    raise StorageUnavailable(f"Document for {app_id!r} vanished after duplicate insert")
                return doc.payload
            return initial
        except StorageUnavailable as e:
            logger.exception("Read Error (%s): %s", app_id, e.message)
            raise StorageUnavailable("Failed to read database") from e

    async def replace(self, app_id: str, payload: Any) -> SaveAcknowledgement:
        validate_app_id(app_id)
        return await self._upsert(app_id, payload, failure_message="Failed to save database")

    async def legacy_write(self, payload: Any) -> SaveAcknowledgement:
        return await self._upsert(LEGACY_APP_ID, payload, failure_message="Legacy save failed")

    async def _upsert(self, app_id: str, payload: Any, *, failure_message: str) -> SaveAcknowledgement:
        if payload is None:
            raise EmptyBody()
        if payload_depth(payload, stop_after=MAX_PAYLOAD_DEPTH) > MAX_PAYLOAD_DEPTH:
            raise PayloadTooDeep(MAX_PAYLOAD_DEPTH)
        try:
            await self._repo.upsert(app_id, payload)
        except StorageUnavailable as e:
            logger.exception("Write Error (%s): %s", app_id, e.message)
            raise StorageUnavailable(failure_message) from e
        if self._log_requests:
            logger.info("WRITE %s", app_id)
        return SaveAcknowledgement(timestamp=_now_ms())

    @staticmethod
    def health_check() -> str:
        return PONG

    @staticmethod
    def legacy_read_path() -> str:
        return f"/{LEGACY_APP_ID}/database.json"
