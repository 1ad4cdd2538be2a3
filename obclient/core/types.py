"""Core type definitions for the order book client.

Prices and quantities are integral on the wire (the gateway uses u64), but
nothing here depends on that beyond the type hints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass
class Order:
    id: int
    side: OrderSide
    price: int
    qty: int

    def to_payload(self) -> Dict[str, int]:
        return {"id": self.id, "price": self.price, "qty": self.qty}


@dataclass(frozen=True)
class Trade:
    price: int
    qty: int
    taker_id: int
    maker_id: int

    @classmethod
    def from_wire(cls, obj: Dict[str, Any]) -> "Trade":
        return cls(
            price=obj["price"],
            qty=obj["qty"],
            taker_id=obj["takerId"],
            maker_id=obj["makerId"],
        )

    def to_wire(self) -> Dict[str, int]:
        return {
            "price": self.price,
            "qty": self.qty,
            "takerId": self.taker_id,
            "makerId": self.maker_id,
        }


@dataclass(frozen=True)
class BookLevel:
    price: int
    qty: int


@dataclass
class OrderBookSnapshot:
    """Point-in-time depth read. Best price first on both sides."""

    bids: List[BookLevel] = field(default_factory=list)
    asks: List[BookLevel] = field(default_factory=list)

    @classmethod
    def from_wire(cls, obj: Dict[str, Any]) -> "OrderBookSnapshot":
        def levels(raw) -> List[BookLevel]:
            return [BookLevel(lvl["price"], lvl["qty"]) for lvl in raw or []]

        return cls(bids=levels(obj.get("bids")), asks=levels(obj.get("asks")))

    def to_wire(self) -> Dict[str, Any]:
        return {
            "bids": [{"price": l.price, "qty": l.qty} for l in self.bids],
            "asks": [{"price": l.price, "qty": l.qty} for l in self.asks],
        }

    @property
    def bid_qty(self) -> int:
        return sum(l.qty for l in self.bids)

    @property
    def ask_qty(self) -> int:
        return sum(l.qty for l in self.asks)

    def best_bid(self) -> Optional[int]:
        return self.bids[0].price if self.bids else None

    def best_ask(self) -> Optional[int]:
        return self.asks[0].price if self.asks else None

    def max_ask(self) -> Optional[int]:
        # worst visible ask; a buy here sweeps every listed level
        if not self.asks:
            return None
        return max(l.price for l in self.asks)

    def is_empty(self) -> bool:
        return not self.bids and not self.asks


def fmt_levels(levels: List[BookLevel]) -> str:
    return ", ".join(f"{l.price}@{l.qty}" for l in levels) or "-"


def fmt_trades(trades: List[Trade]) -> str:
    return (
        ", ".join(
            f"{t.qty}@{t.price}(taker:{t.taker_id},maker:{t.maker_id})" for t in trades
        )
        or "-"
    )
