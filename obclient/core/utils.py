"""Small utilities."""

from __future__ import annotations

import random
from typing import Optional


class OrderIdAllocator:
    """Hands out monotonically increasing order ids. There is no reset."""

    def __init__(self, start: int = 1):
        self._next = int(start)

    def allocate(self) -> int:
        ident = self._next
        self._next += 1
        return ident

    def peek(self) -> int:
        return self._next


def uniform_delay(lo: float, hi: float, rng: Optional[random.Random] = None) -> float:
    """Seconds drawn uniformly from [lo, hi]."""
    if hi < lo:
        raise ValueError(f"delay bounds reversed: {lo} > {hi}")
    return (rng or random).uniform(lo, hi)


def http_to_ws(url: str) -> str:
    if url.startswith("https://"):
        return "wss://" + url[len("https://") :]
    if url.startswith("http://"):
        return "ws://" + url[len("http://") :]
    return url
