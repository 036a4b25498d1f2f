from __future__ import annotations

import asyncio
import sys
from typing import Any, Sequence

from ...core import diagnostics
from ...core.serialization import serialize_entries_to_jsonl


class StdoutJsonSink:
    """Async-friendly stdout sink that writes structured JSON lines.

    - Emits one JSON object per entry, in batch order
    - The save method token is recorded on each line as ``saveMethodName``
    - Never raises upstream; errors are contained
    """

    name = "stdout-json"

    _lock: asyncio.Lock

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def save(
        self,
        entries: Sequence[Any],
        save_method_name: str | None,
    ) -> None:
        try:
            rows = []
            for entry in entries:
                row = entry.to_dict() if hasattr(entry, "to_dict") else dict(entry)
                row["saveMethodName"] = save_method_name
                rows.append(row)
            data = serialize_entries_to_jsonl(rows)
            if not data:
                return None
            # Coalesce write+flush into a single to_thread call
            async with self._lock:

                def _write_lines() -> None:
                    buf = sys.stdout.buffer
                    buf.write(data)
                    buf.flush()

                await asyncio.to_thread(_write_lines)
        except Exception as e:
            diagnostics.warn(
                "stdout-sink",
                "failed to write batch",
                reason=type(e).__name__,
                detail=str(e),
            )
            return None
