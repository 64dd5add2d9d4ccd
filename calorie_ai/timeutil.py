# -*- coding: utf-8 -*-
"""Clock and id helpers."""

from __future__ import annotations

import threading
import time
from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]

_id_lock = threading.Lock()
_last_ms = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_day(ts: datetime) -> date:
    """Calendar date of ``ts`` in the device's local time zone."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone().date()


def new_id(prefix: str = "") -> str:
    """Creation-time-ordered unique id (epoch millis, bumped on collision)."""
    global _last_ms
    with _id_lock:
        ms = int(time.time() * 1000)
        if ms <= _last_ms:
            ms = _last_ms + 1
        _last_ms = ms
    return f"{prefix}-{ms}" if prefix else str(ms)
