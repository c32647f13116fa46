from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from errors import EmptyBody, MalformedBody, PayloadTooDeep, PayloadTooLarge
from settings import DEFAULT_MAX_BODY_BYTES
from sync_service import MAX_PAYLOAD_DEPTH, DocumentSyncService, SaveAcknowledgement, validate_app_id

router = APIRouter(tags=["sync"])
logger = logging.getLogger(__name__)

USAGE_BANNER = "API Server Running. Use /:your-app-id/database.json to sync data."

# Express answers HEAD on every GET route.
READ_METHODS = ["GET", "HEAD"]


def get_sync_service(request: Request) -> DocumentSyncService:
    return request.app.state.sync_service


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON and can't be stored faithfully.
    raise ValueError(f"{name} is not valid JSON")


async def read_json_body(request: Request) -> Any:
    """
    Parse the request body as arbitrary JSON.

    Missing/blank bodies and a literal `null` count as "no data".
    """
    limit = getattr(request.app.state, "max_body_bytes", DEFAULT_MAX_BODY_BYTES)

    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge(limit)

    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLarge(limit)
    if not raw.strip():
        raise EmptyBody()
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except RecursionError as e:
        raise PayloadTooDeep(MAX_PAYLOAD_DEPTH) from e
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedBody() from e
    if payload is None:
        raise EmptyBody()
    return payload


@router.api_route("/ping", methods=READ_METHODS, response_class=PlainTextResponse)
async def ping(service: DocumentSyncService = Depends(get_sync_service)):
    return PlainTextResponse(service.health_check())


# Backward compatibility: old clients hit the root paths, which map to "pkgen-legacy".
@router.api_route("/database.json", methods=READ_METHODS)
async def legacy_read_redirect(service: DocumentSyncService = Depends(get_sync_service)):
    return RedirectResponse(url=service.legacy_read_path(), status_code=302)


@router.post("/api/save-db", response_model=SaveAcknowledgement)
async def legacy_save(request: Request, service: DocumentSyncService = Depends(get_sync_service)):
    # A redirect can't carry the body across, so write directly.
    payload = await read_json_body(request)
    return await service.legacy_write(payload)


@router.api_route("/{app_id}/database.json", methods=READ_METHODS)
async def read_database(app_id: str, service: DocumentSyncService = Depends(get_sync_service)):
    payload = await service.read_or_init(app_id)
    return JSONResponse(payload)


@router.post("/{app_id}/save-db", response_model=SaveAcknowledgement)
async def save_database(
    app_id: str,
    request: Request,
    service: DocumentSyncService = Depends(get_sync_service),
):
    validate_app_id(app_id)
    payload = await read_json_body(request)
    return await service.replace(app_id, payload)


@router.api_route(
    "/{rest:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def usage_banner(rest: str):
    return PlainTextResponse(USAGE_BANNER, status_code=404)
