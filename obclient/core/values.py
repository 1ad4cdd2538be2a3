"""Tagged result values returned by the gateway.

Results arrive as single-key objects, the key naming the variant, e.g.
``{"BookSnapshot": {...}}``, ``{"ArrayTrade": [...]}`` or ``{"OptionU64": 42}``.
Unknown tags decode to ``UnknownValue`` so callers that only forward results
(the monitor dispatcher) never fail on them; the ``expect_*`` helpers raise
``ResultDecodeError`` when a specific shape is required.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import ResultDecodeError
from .types import OrderBookSnapshot, Trade


@dataclass(frozen=True)
class BookSnapshotValue:
    snapshot: OrderBookSnapshot


@dataclass(frozen=True)
class TradesValue:
    trades: List[Trade]


@dataclass(frozen=True)
class OptionU64Value:
    value: Optional[int]


@dataclass(frozen=True)
class U64Value:
    value: int


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class UnknownValue:
    tag: Optional[str]
    payload: Any


Value = Union[
    BookSnapshotValue, TradesValue, OptionU64Value, U64Value, StringValue, UnknownValue
]


def u64(n: int) -> Dict[str, int]:
    """Encode an init value for a fiber request."""
    return {"U64": int(n)}


def _decode_tagged(tag: str, body: Any) -> Value:
    if tag == "BookSnapshot":
        if not isinstance(body, dict):
            raise ValueError("BookSnapshot body must be an object")
        return BookSnapshotValue(OrderBookSnapshot.from_wire(body))
    if tag == "ArrayTrade":
        return TradesValue([Trade.from_wire(t) for t in body or []])
    if tag == "OptionU64":
        return OptionU64Value(None if body is None else int(body))
    if tag == "U64":
        return U64Value(int(body))
    if tag == "String":
        return StringValue(str(body))
    return UnknownValue(tag, body)


def decode_value(raw: Any) -> Value:
    if not isinstance(raw, dict) or len(raw) != 1:
        return UnknownValue(None, raw)
    ((tag, body),) = raw.items()
    try:
        return _decode_tagged(tag, body)
    except (KeyError, TypeError, ValueError):
        return UnknownValue(tag, body)


def _expect(raw: Any, kind: type) -> Any:
    value = decode_value(raw)
    if not isinstance(value, kind):
        raise ResultDecodeError(f"expected {kind.__name__}, got {raw!r}")
    return value


def expect_snapshot(raw: Any) -> OrderBookSnapshot:
    return _expect(raw, BookSnapshotValue).snapshot


def expect_trades(raw: Any) -> List[Trade]:
    return _expect(raw, TradesValue).trades


def expect_option_u64(raw: Any) -> Optional[int]:
    return _expect(raw, OptionU64Value).value


def expect_u64(raw: Any) -> int:
    return _expect(raw, U64Value).value
