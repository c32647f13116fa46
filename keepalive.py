from __future__ import annotations

import asyncio
import contextlib
import logging

import httpx

logger = logging.getLogger(__name__)

PING_PATH = "/ping"


class KeepAlivePinger:
    """
    Periodically GETs this service's own /ping endpoint so free-tier hosts
    don't put it to sleep. Responses are discarded; failures are logged only.
    """

    def __init__(
        self,
        base_url: str,
        interval_seconds: float,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self.url = base_url.rstrip("/") + PING_PATH
        self.interval_seconds = interval_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def ping_once(self) -> int | None:
        try:
            resp = await self._client.get(self.url)
        except Exception as e:
            logger.warning("Keep-alive failed: %r", e)
            return None
        logger.debug("Keep-alive ping status: %s", resp.status_code)
        return resp.status_code

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.ping_once()

    def start(self) -> None:
        if self.running:
            return
        logger.info("Keep-alive enabled. Target: %s (every %ss)", self.url, self.interval_seconds)
        self._task = asyncio.create_task(self._run(), name="keepalive")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        if self._owns_client:
            await self._client.aclose()
