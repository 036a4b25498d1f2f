from __future__ import annotations

import asyncio
from typing import Any, Sequence


class InMemorySink:
    """Collects saved batches in memory.

    Each call appends ``(entries, save_method_name)`` to ``batches``; the
    entries list is a copy so later buffer mutations do not leak in.
    """

    name = "memory"

    def __init__(self) -> None:
        self.batches: list[tuple[list[Any], str | None]] = []
        self._lock = asyncio.Lock()

    async def save(
        self,
        entries: Sequence[Any],
        save_method_name: str | None,
    ) -> None:
        async with self._lock:
            self.batches.append((list(entries), save_method_name))

    @property
    def entries(self) -> list[Any]:
        """Every saved entry across batches, in save order."""
        return [e for batch, _ in self.batches for e in batch]

    def clear(self) -> None:
        self.batches.clear()
