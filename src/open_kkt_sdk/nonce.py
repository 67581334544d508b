from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable

NONCE_PREFIX = "nonce_"


@dataclass
class NonceGenerator:
    """Produces ``nonce_<microsecond timestamp digits>`` values.

    Values from one generator are strictly increasing, so two nonces taken
    within the same clock tick still differ.
    """

    clock: Callable[[], float] = time.time
    _last: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def next_nonce(self) -> str:
        with self._lock:
            # same digits as the timestamp rendered with six decimals, separator dropped
            value = int(round(self.clock() * 1_000_000))
            if value <= self._last:
                value = self._last + 1
            self._last = value
        return f"{NONCE_PREFIX}{value}"
