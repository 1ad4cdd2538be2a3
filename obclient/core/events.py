"""Frames seen on gateway channels.

The monitor channel broadcasts two shapes to every listener::

    {"NewRequest": {"id": 7, "fiber_type": "order_book",
                    "function_key": "best_bid", "init_values": []}}
    {"TxUpdate": {"meta": {"id": 7, "status": {"type": "Finished"}},
                  "result": {...}}}

Direct channels reply with bare ``{"meta": {...}, "result": ...}`` frames.
Ids and fiber types are bare values; the status is always the tagged object.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


class TxStatus:
    CREATED = "Created"
    PENDING = "Pending"
    FINISHED = "Finished"

    TERMINAL = frozenset({FINISHED})


@dataclass(frozen=True)
class Meta:
    id: Optional[int]
    status: str


@dataclass(frozen=True)
class NewRequestEvent:
    id: int
    fiber_type: str
    function_key: str
    init_values: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class TxUpdateEvent:
    meta: Meta
    result: Any = None

    @property
    def finished(self) -> bool:
        return self.meta.status in TxStatus.TERMINAL


MonitorEvent = Union[NewRequestEvent, TxUpdateEvent]


def parse_frame(raw: Union[str, bytes]) -> Optional[Dict[str, Any]]:
    """Return the JSON object in ``raw`` or None for anything else."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return msg if isinstance(msg, dict) else None


def decode_status(obj: Any) -> Optional[str]:
    """Status name from the adjacently tagged ``{"type": ..., "data": ...}`` form."""
    if not isinstance(obj, dict):
        return None
    name = obj.get("type")
    return name if isinstance(name, str) else None


def decode_meta(obj: Any) -> Optional[Meta]:
    if not isinstance(obj, dict):
        return None
    status = decode_status(obj.get("status"))
    if status is None:
        return None
    ident = obj.get("id")
    if ident is not None and not isinstance(ident, int):
        return None
    return Meta(id=ident, status=status)


def decode_monitor_event(msg: Dict[str, Any]) -> Optional[MonitorEvent]:
    body = msg.get("NewRequest")
    if isinstance(body, dict):
        ident = body.get("id")
        fiber_type = body.get("fiber_type")
        function_key = body.get("function_key")
        init_values = body.get("init_values") or []
        if (
            isinstance(ident, int)
            and isinstance(fiber_type, str)
            and isinstance(function_key, str)
            and isinstance(init_values, list)
        ):
            return NewRequestEvent(ident, fiber_type, function_key, init_values)
        return None
    body = msg.get("TxUpdate")
    if isinstance(body, dict):
        meta = decode_meta(body.get("meta"))
        if meta is None or meta.id is None:
            return None
        return TxUpdateEvent(meta=meta, result=body.get("result"))
    return None
