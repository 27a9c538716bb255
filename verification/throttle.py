"""
verification/throttle.py

Per-host spacing between consecutive link probes.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from urllib.parse import urlparse


class HostThrottle:
    """
    Enforces a minimum interval between probes to the same host.
    """

    def __init__(
        self,
        *,
        min_interval_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._min_interval_seconds = max(0.0, min_interval_seconds)
        self._sleep = sleep
        self._monotonic = monotonic
        self._last_probe_by_host: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, url: str) -> float:
        """
        Sleep as needed before probing `url`; returns the seconds slept.
        """

        if self._min_interval_seconds <= 0:
            return 0.0

        parsed = urlparse(url)
        host = parsed.netloc.lower()
        if not host:
            return 0.0

        with self._lock:
            last_time = self._last_probe_by_host.get(host)
            wait_seconds = 0.0
            if last_time is not None:
                wait_seconds = self._min_interval_seconds - (self._monotonic() - last_time)
                if wait_seconds > 0:
                    self._sleep(wait_seconds)
                else:
                    wait_seconds = 0.0
            self._last_probe_by_host[host] = self._monotonic()
        return wait_seconds
