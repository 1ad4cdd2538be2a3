"""Correlated dispatch over the gateway's shared monitor channel.

Requests are submitted with a one-way ``POST /new_request`` that never
returns the id the gateway assigns. The id shows up later on ``/monitor`` as
a ``NewRequest`` broadcast carrying the request's content, and results follow
as ``TxUpdate`` broadcasts keyed by that id. Every listener sees every event,
so the dispatcher keeps two tables:

- ``_pending``: requests with no id yet, in submission order. A ``NewRequest``
  claims the first entry whose (fiber_type, function_key, init_values) is
  equal by value. Duplicates are therefore matched FIFO.
- ``_waiters``: requests with an id, waiting for a ``Finished`` update.

An entry is registered before its POST is sent because the broadcast may
beat the HTTP response back. When the monitor closes every outstanding
request fails with ``ChannelClosedError``; there is no reconnect.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

import requests
import websockets

from ..core.errors import ChannelClosedError, SubmissionError, TransportError
from ..core.events import NewRequestEvent, TxUpdateEvent, decode_monitor_event
from .ws_client import TRANSPORT_ERRORS, iter_frames

log = logging.getLogger(__name__)

Post = Callable[[str, Dict[str, Any]], Awaitable[None]]


@dataclass(eq=False)
class PendingRequest:
    fiber_type: str
    function_key: str
    init_values: List[Any]
    future: "asyncio.Future[Any]"

    def matches(self, event: NewRequestEvent) -> bool:
        return (
            self.fiber_type == event.fiber_type
            and self.function_key == event.function_key
            and self.init_values == event.init_values
        )


@dataclass(eq=False)
class Waiter:
    id: int
    future: "asyncio.Future[Any]" = field(repr=False)


def _post_blocking(url: str, body: Dict[str, Any], timeout: Optional[float]) -> None:
    resp = requests.post(url, json=body, timeout=timeout)
    if not (200 <= resp.status_code < 300):
        raise SubmissionError(f"POST {url} {resp.status_code} {resp.text}")


async def http_post(url: str, body: Dict[str, Any], timeout: Optional[float] = None) -> None:
    """Submit ``body`` with requests on a worker thread."""
    try:
        await asyncio.to_thread(_post_blocking, url, body, timeout)
    except requests.RequestException as exc:
        raise SubmissionError(f"POST {url}: {exc}") from exc


class MonitorDispatcher:
    def __init__(
        self,
        monitor_url: str,
        submit_url: str,
        connect: Optional[Callable[[str], Awaitable[Any]]] = None,
        post: Optional[Post] = None,
    ):
        self.monitor_url = monitor_url
        self.submit_url = submit_url
        self._connect = connect or websockets.connect
        self._post = post or http_post
        self._pending: List[PendingRequest] = []
        self._waiters: Dict[int, Waiter] = {}
        self._ws: Any = None
        self._reader: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def waiter_count(self) -> int:
        return len(self._waiters)

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> "MonitorDispatcher":
        if self._ws is not None:
            raise RuntimeError("monitor already started")
        try:
            self._ws = await self._connect(self.monitor_url)
        except TRANSPORT_ERRORS as exc:
            raise TransportError(f"{self.monitor_url}: {exc}") from exc
        self._reader = asyncio.create_task(self._read_loop())
        log.info("connected to monitor %s", self.monitor_url)
        return self

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
        if self._reader is not None:
            try:
                await self._reader
            except Exception:
                # reader failures are logged, never raised from close
                log.exception("monitor reader failed")
        self._fail_all(ChannelClosedError("monitor closed"))

    async def __aenter__(self) -> "MonitorDispatcher":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def submit(
        self, fiber_type: str, function_key: str, init_values: Optional[List[Any]] = None
    ) -> Any:
        """Submit a request and return the result of its ``Finished`` update."""
        if self._closed:
            raise ChannelClosedError("monitor closed")
        if self._ws is None:
            raise RuntimeError("monitor not connected")
        values = list(init_values or [])
        entry = PendingRequest(
            fiber_type, function_key, values, asyncio.get_running_loop().create_future()
        )
        self._pending.append(entry)
        blueprint = {
            "fiber_type": fiber_type,
            "function_key": function_key,
            "init_values": values,
        }
        try:
            await self._post(self.submit_url, blueprint)
        except BaseException:
            # no id will ever be broadcast for a rejected submission
            self._discard(entry.future)
            raise
        try:
            return await entry.future
        finally:
            self._discard(entry.future)

    def handle_frame(self, msg: Dict[str, Any]) -> None:
        event = decode_monitor_event(msg)
        if isinstance(event, NewRequestEvent):
            self._on_new_request(event)
        elif isinstance(event, TxUpdateEvent):
            self._on_update(event)

    def _on_new_request(self, event: NewRequestEvent) -> None:
        for i, entry in enumerate(self._pending):
            if entry.matches(event):
                del self._pending[i]
                if not entry.future.done():
                    self._waiters[event.id] = Waiter(event.id, entry.future)
                return
        log.debug("unclaimed request id=%s %s", event.id, event.function_key)

    def _on_update(self, event: TxUpdateEvent) -> None:
        waiter = self._waiters.get(event.meta.id)
        if waiter is None or not event.finished:
            return
        del self._waiters[event.meta.id]
        if not waiter.future.done():
            waiter.future.set_result(event.result)

    def _discard(self, future: "asyncio.Future[Any]") -> None:
        self._pending = [p for p in self._pending if p.future is not future]
        for ident in [i for i, w in self._waiters.items() if w.future is future]:
            del self._waiters[ident]
        if future.done() and not future.cancelled():
            future.exception()

    def _fail_all(self, exc: Exception) -> None:
        self._closed = True
        outstanding = [p.future for p in self._pending]
        outstanding += [w.future for w in self._waiters.values()]
        self._pending.clear()
        self._waiters.clear()
        for fut in outstanding:
            if not fut.done():
                fut.set_exception(exc)
        if outstanding:
            log.warning("%s; failed %d outstanding request(s)", exc, len(outstanding))

    async def _read_loop(self) -> None:
        reason = "monitor closed"
        try:
            async for msg in iter_frames(self._ws):
                self.handle_frame(msg)
        except TRANSPORT_ERRORS as exc:
            reason = f"monitor closed: {type(exc).__name__}: {exc}"
        finally:
            self._fail_all(ChannelClosedError(reason))
