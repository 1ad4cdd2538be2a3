"""Prometheus counters for the client loops."""

from __future__ import annotations

from prometheus_client import Counter

orders_total = Counter("obclient_orders_total", "Orders sent to the venue", ["side"])
trades_total = Counter("obclient_trades_total", "Trades returned by the venue")
cycle_errors_total = Counter(
    "obclient_cycle_errors_total", "Loop cycles that ended in an error"
)


def inc_orders(side: str, n: int = 1) -> None:
    orders_total.labels(side=side).inc(n)


def inc_trades(n: int = 1) -> None:
    if n > 0:
        trades_total.inc(n)


def inc_cycle_errors() -> None:
    cycle_errors_total.inc()
