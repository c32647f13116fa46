from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

APP_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,50}$")


def is_valid_app_id(app_id: Any) -> bool:
    return isinstance(app_id, str) and APP_ID_RE.fullmatch(app_id) is not None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppDocument(BaseModel):
    """
    One stored application document. Mirrors the on-disk record:
      { "appId": "...", "payload": <any JSON>, "createdAt": "...", "updatedAt": "..." }

    `payload` is opaque: whatever JSON the client saved, never validated.
    """

    model_config = ConfigDict(populate_by_name=True)

    app_id: str = Field(alias="appId")
    payload: Any = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def new(cls, app_id: str, payload: Any, *, created_at: datetime | None = None) -> "AppDocument":
        now = utcnow()
        return cls(app_id=app_id, payload=payload, created_at=created_at or now, updated_at=now)

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "AppDocument":
        return cls.model_validate(doc)

    def to_disk_doc(self) -> dict[str, Any]:
        # The payload is already plain JSON; pydantic's serializer would
        # coerce non-finite floats and cap nesting depth.
        doc = self.model_dump(mode="json", by_alias=True, exclude={"payload"})
        doc["payload"] = self.payload
        return doc
