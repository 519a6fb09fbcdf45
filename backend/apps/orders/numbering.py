"""
Order number allocation.

Numbers look like ``ORD-<time36>-<rand36>``: a base36 millisecond clock that
never goes backwards within the process, followed by six random base36
characters. Nothing here touches the database; the unique column on
``Order.order_number`` catches the rare collision.
"""
from __future__ import annotations

import re
import secrets
import threading
import time
from functools import lru_cache
from typing import Callable, Optional

_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
RANDOM_LENGTH = 6
DEFAULT_PREFIX = "ORD"
ORDER_NUMBER_PATTERN = re.compile(r"^[A-Z0-9]+-[0-9A-Z]+-[0-9A-Z]{6}$")


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


class OrderNumberGenerator:
    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.prefix = prefix.upper()
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._lock = threading.Lock()
        self._last_tick = -1

    def _next_tick(self) -> int:
        with self._lock:
            tick = self._clock()
            if tick <= self._last_tick:
                tick = self._last_tick + 1
            self._last_tick = tick
            return tick

    def _random_part(self) -> str:
        return "".join(secrets.choice(_ALPHABET) for _ in range(RANDOM_LENGTH))

    def generate(self) -> str:
        return f"{self.prefix}-{to_base36(self._next_tick())}-{self._random_part()}"

    __call__ = generate


@lru_cache(maxsize=1)
def get_order_number_generator() -> OrderNumberGenerator:
    from django.conf import settings

    return OrderNumberGenerator(
        prefix=getattr(settings, "STOREFRONT_ORDER_PREFIX", DEFAULT_PREFIX)
    )


def generate_order_number() -> str:
    return get_order_number_generator().generate()
