"""WebSocket plumbing shared by the gateway adapters.

- ``iter_frames`` turns a connection into a stream of JSON objects, dropping
  anything that does not parse (the gateway interleaves plain-text error
  strings and heartbeats on some routes).
- ``DirectChannel`` is the one-shot request/response form: one fresh
  connection per request, closed as soon as a ``Finished`` frame arrives.

There is no retry and no timeout here; callers loop on whole cycles.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Callable, Dict, Optional

import websockets
from websockets.exceptions import WebSocketException

from ..core.errors import ChannelClosedError, TransportError
from ..core.events import TxStatus, decode_meta, parse_frame

log = logging.getLogger(__name__)

Connect = Callable[[str], Any]

TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)


async def iter_frames(ws) -> AsyncIterator[Dict[str, Any]]:
    async for raw in ws:
        msg = parse_frame(raw)
        if msg is None:
            log.debug("dropping malformed frame: %.200r", raw)
            continue
        yield msg


class DirectChannel:
    """One ephemeral duplex channel per logical request."""

    def __init__(self, connect: Optional[Connect] = None):
        self._connect = connect or websockets.connect

    async def request(self, url: str, payload: Dict[str, Any]) -> Any:
        """Send ``payload`` on a new channel to ``url`` and return its result.

        Resolves with the ``result`` field of the first frame whose status is
        ``Finished``. Raises ``TransportError`` on connection failure and
        ``ChannelClosedError`` if the remote hangs up before finishing.
        """
        try:
            async with self._connect(url) as ws:
                await ws.send(json.dumps(payload))
                async for msg in iter_frames(ws):
                    meta = decode_meta(msg.get("meta"))
                    if meta is None:
                        log.debug("frame without status on %s: %r", url, msg)
                        continue
                    if meta.status in TxStatus.TERMINAL:
                        return msg.get("result")
        except TRANSPORT_ERRORS as exc:
            raise TransportError(f"{url}: {type(exc).__name__}: {exc}") from exc
        raise ChannelClosedError(f"{url} closed before {TxStatus.FINISHED}")
