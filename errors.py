from __future__ import annotations

from typing import Any


class DocSyncError(Exception):
    """Base error for the sync service. Carries the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidIdentifier(DocSyncError):
    status_code = 400

    def __init__(self, app_id: Any, message: str = "Invalid App ID"):
        super().__init__(message)
        self.app_id = app_id


class EmptyBody(DocSyncError):
    status_code = 400

    def __init__(self, message: str = "No data provided"):
        super().__init__(message)


class MalformedBody(DocSyncError):
    status_code = 400

    def __init__(self, message: str = "Request body is not valid JSON"):
        super().__init__(message)


class PayloadTooLarge(DocSyncError):
    status_code = 413

    def __init__(self, limit: int):
        super().__init__(f"Payload exceeds {limit} bytes")
        self.limit = limit


class PayloadTooDeep(DocSyncError):
    status_code = 400

    def __init__(self, limit: int):
        super().__init__(f"Payload nested deeper than {limit} levels")
        self.limit = limit


class StorageUnavailable(DocSyncError):
    status_code = 500


class DuplicateAppId(DocSyncError):
    """Raised by a store when inserting an appId that already has a document."""

    status_code = 409

    def __init__(self, app_id: str):
        super().__init__(f"Document already exists for appId {app_id!r}")
        self.app_id = app_id


class ConfigurationError(Exception):
    """Startup configuration is missing or unusable."""
