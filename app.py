from __future__ import annotations

import contextlib
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from errors import ConfigurationError, DocSyncError, StorageUnavailable
from keepalive import KeepAlivePinger
from persistence import AppDocumentStore, AsyncStoreRepository, document_store_from_uri
from settings import Settings, get_settings
from sync_service import DocumentSyncService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store: AppDocumentStore = app.state.store or document_store_from_uri(settings.docstore_uri)

    repo = AsyncStoreRepository(store)
    # A store that can't be opened aborts startup; there is no degraded mode.
    await repo.open()
    app.state.sync_service = DocumentSyncService(repo, log_requests=settings.debug_log_requests)

    pinger: KeepAlivePinger | None = None
    if settings.keepalive_enabled:
        pinger = KeepAlivePinger(settings.keepalive_base_url, settings.keepalive_interval_seconds)
        pinger.start()

    try:
        yield
    finally:
        if pinger is not None:
            await pinger.stop()
        await repo.close()


def create_app(settings: Settings | None = None, *, store: AppDocumentStore | None = None) -> FastAPI:
    """
    Build the ASGI app. With no arguments, configuration comes from the
    environment (and local.env), so `uvicorn app:create_app --factory` works.
    """
    if settings is None:
        load_dotenv("local.env")
        settings = get_settings()

    from endpoints.sync_endpoints import router as sync_router

    # No docs routes: every unmatched path must get the usage banner.
    app = FastAPI(title="App Data Sync", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.store = store
    app.state.max_body_bytes = settings.max_body_bytes

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocSyncError)
    async def doc_sync_error_handler(request: Request, exc: DocSyncError):
        if exc.status_code < 500:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    app.include_router(sync_router)

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    load_dotenv("local.env")

    try:
        settings = get_settings()
        store = document_store_from_uri(settings.docstore_uri)
        store.open()
    except (ConfigurationError, StorageUnavailable) as e:
        logger.critical("FATAL: %s", e)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    import uvicorn

    logger.info("Server running on port %s", settings.port)
    uvicorn.run(create_app(settings, store=store), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
