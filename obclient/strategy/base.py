"""Strategy base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.types import Order, OrderBookSnapshot, Trade


@dataclass
class CycleResult:
    # seconds to wait before the next cycle; None means the runner's period
    delay: Optional[float] = None
    orders: List[Order] = field(default_factory=list)
    trades: List[Trade] = field(default_factory=list)
    snapshot: Optional[OrderBookSnapshot] = None


class Strategy(ABC):
    @abstractmethod
    async def run_cycle(self, tick: int) -> CycleResult: ...
