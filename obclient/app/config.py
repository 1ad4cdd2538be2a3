"""Settings resolved from the environment (and ``.env`` when present).

Timing variables are given in milliseconds to match the gateway tooling and
exposed here in seconds.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv  # type: ignore

from ..core.errors import ConfigError
from ..core.utils import http_to_ws

MODES = ("direct", "monitor")


@dataclass(frozen=True)
class Settings:
    gateway_url: str = "http://localhost:5000"
    mode: Optional[str] = None
    period_s: float = 0.5
    n_levels: int = 100
    depth_levels: int = 5
    empty_wait_min_s: float = 5.0
    empty_wait_max_s: float = 7.0
    start_order_id: Optional[int] = None
    batch: int = 1
    base_price: int = 1000
    price_spread: int = 20
    qty_min: int = 1
    qty_max: int = 5
    log_level: str = "INFO"

    @property
    def ws_base(self) -> str:
        return http_to_ws(self.gateway_url.rstrip("/"))

    @property
    def monitor_url(self) -> str:
        return self.ws_base + "/monitor"

    @property
    def submit_url(self) -> str:
        return self.gateway_url.rstrip("/") + "/new_request"

    def first_order_id(self, default: int) -> int:
        return default if self.start_order_id is None else self.start_order_id


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


def _opt_int(env: Mapping[str, str], key: str) -> Optional[int]:
    if not env.get(key):
        return None
    return _int(env, key, 0)


def _ms(env: Mapping[str, str], key: str, default_s: float) -> float:
    return _int(env, key, int(default_s * 1000)) / 1000.0


def load_settings(
    env: Optional[Mapping[str, str]] = None, period_default_s: float = 0.5
) -> Settings:
    """Build ``Settings`` from ``env`` (``os.environ`` after ``load_dotenv``)."""
    if env is None:
        load_dotenv()
        env = os.environ
    mode = (env.get("CLIENT_MODE") or "").lower() or None
    if mode is not None and mode not in MODES:
        raise ConfigError(f"CLIENT_MODE must be one of {MODES}, got {mode!r}")
    settings = Settings(
        gateway_url=env.get("GATEWAY_URL") or Settings.gateway_url,
        mode=mode,
        period_s=_ms(env, "PERIOD_MS", period_default_s),
        n_levels=_int(env, "N_LEVELS", Settings.n_levels),
        depth_levels=_int(env, "DEPTH_LEVELS", Settings.depth_levels),
        empty_wait_min_s=_ms(env, "EMPTY_WAIT_MIN_MS", Settings.empty_wait_min_s),
        empty_wait_max_s=_ms(env, "EMPTY_WAIT_MAX_MS", Settings.empty_wait_max_s),
        start_order_id=_opt_int(env, "START_ORDER_ID"),
        batch=_int(env, "BATCH", Settings.batch),
        base_price=_int(env, "BASE_PRICE", Settings.base_price),
        price_spread=_int(env, "PRICE_SPREAD", Settings.price_spread),
        qty_min=_int(env, "QTY_MIN", Settings.qty_min),
        qty_max=_int(env, "QTY_MAX", Settings.qty_max),
        log_level=(env.get("LOG_LEVEL") or Settings.log_level).upper(),
    )
    if settings.qty_min > settings.qty_max:
        raise ConfigError("QTY_MIN must not exceed QTY_MAX")
    if settings.empty_wait_min_s > settings.empty_wait_max_s:
        raise ConfigError("EMPTY_WAIT_MIN_MS must not exceed EMPTY_WAIT_MAX_MS")
    return settings
