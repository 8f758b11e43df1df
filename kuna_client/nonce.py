from __future__ import annotations

import time
from typing import Callable

NonceProvider = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def fixed_nonce(value: int) -> NonceProvider:
    """Provider that always returns ``value``; for tests and replays."""
    value = int(value)

    def _provider() -> int:
        return value

    return _provider
