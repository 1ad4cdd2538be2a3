"""Cycle runner shared by the client loops.

A cycle that raises is logged and counted, then the loop carries on after
the normal period. Only cancellation (process shutdown) ends an unbounded
run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..io.metrics import inc_cycle_errors
from ..strategy.base import Strategy

log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


async def run_cycles(
    strategy: Strategy,
    period: float,
    cycles: Optional[int] = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Run ``cycles`` cycles (forever when None); return the number that failed."""
    tick = 0
    failed = 0
    while cycles is None or tick < cycles:
        tick += 1
        delay = period
        try:
            result = await strategy.run_cycle(tick)
            if result.delay is not None:
                delay = result.delay
        except Exception:
            failed += 1
            inc_cycle_errors()
            log.exception("tick %d error", tick)
        await sleep(delay)
    return failed


async def run_forever(strategy: Strategy, period: float, sleep: Sleep = asyncio.sleep) -> None:
    await run_cycles(strategy, period, None, sleep)
