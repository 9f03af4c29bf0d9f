from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger("raidemulator")

_POST_ATTEMPTS = 2
_RETRY_DELAY_SECONDS = 0.1


def _is_retryable(exc: Exception) -> bool:
    # The engine is local: a refused connection or a 5xx may clear up, a 4xx will not.
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.RequestError)


def zone_changed_payload(zone_name: Optional[str]) -> Dict[str, Any]:
    return {"type": "zone_changed", "zoneName": zone_name or ""}


def log_event_payload(logs: List[str]) -> Dict[str, Any]:
    # Lines are forwarded verbatim; the timeline engine matches on raw text.
    return {"type": "log_event", "logs": list(logs)}


class TimelineWebhookClient:
    """Forwards replay notifications to a timeline engine, in emission order.

    Listener callbacks run inside the replay tick and only enqueue. A single
    worker task posts the queue in order, so a slow or unreachable engine never
    stalls the replay.
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        env: str = "stage",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._webhook_url = (webhook_url or "").strip()
        self._env = env
        # Tight timeouts: the timeline engine is local and best-effort.
        timeout = httpx.Timeout(5.0, connect=2.0)
        limits = httpx.Limits(max_keepalive_connections=4, max_connections=8)
        self._client = httpx.AsyncClient(timeout=timeout, limits=limits, transport=transport)
        self._queue: "asyncio.Queue[Optional[Dict[str, Any]]]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

        self.posted = 0
        self.failed = 0

    @property
    def enabled(self) -> bool:
        return bool(self._webhook_url)

    def start(self) -> None:
        if self._worker is None and self.enabled:
            self._worker = asyncio.create_task(self._run())

    async def aclose(self) -> None:
        if self._worker is not None:
            self._queue.put_nowait(None)
            await self._worker
            self._worker = None
        await self._client.aclose()

    # ReplayListener
    def on_zone_changed(self, zone_name: Optional[str]) -> None:
        self._enqueue(zone_changed_payload(zone_name))

    def on_log_event(self, logs: List[str]) -> None:
        # Empty batches have no effect downstream; skip the round trip.
        if not logs:
            return
        self._enqueue(log_event_payload(logs))

    def _enqueue(self, payload: Dict[str, Any]) -> None:
        if not self.enabled:
            return
        payload["env"] = self._env
        self._queue.put_nowait(payload)

    async def _run(self) -> None:
        while True:
            payload = await self._queue.get()
            if payload is None:
                return
            try:
                await self.post(payload)
                self.posted += 1
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                self.failed += 1
                logger.warning("Timeline webhook post failed (%s): %s", payload.get("type"), e)

    async def post(self, payload: Dict[str, Any]) -> None:
        """POST one notification; one retry for transport errors and 5xx."""
        for attempt in range(_POST_ATTEMPTS):
            try:
                resp = await self._client.post(self._webhook_url, json=payload)
                resp.raise_for_status()
                return
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                if attempt + 1 >= _POST_ATTEMPTS or not _is_retryable(e):
                    raise
                await asyncio.sleep(_RETRY_DELAY_SECONDS)
