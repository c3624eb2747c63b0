from __future__ import annotations

from typing import Protocol


class CounterRepository(Protocol):
    def next_value(self, key: str) -> int:
        """Atomically increment the counter for ``key`` and return the new value.

        A missing counter starts at 1. Implementations must perform the
        increment and the read as one operation.
        """

        raise NotImplementedError
