"""
JSON serialization of log entries and batches using orjson.

Serializers return a ``SerializedView`` exposing the bytes directly so sinks
can write them to stdout or an HTTP body without re-encoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

import orjson

from .errors import SerializationError


def _default(obj: Any) -> Any:
    """Default serializer hook for unsupported types."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True, exclude_none=True)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class SerializedView:
    """A lightweight container exposing the serialized bytes."""

    data: bytes

    def __bytes__(self) -> bytes:
        return self.data


def serialize_mapping_to_json_bytes(payload: Mapping[str, Any]) -> SerializedView:
    """Serialize a mapping to JSON bytes without an intermediate str."""
    try:
        data = orjson.dumps(payload, default=_default)
    except TypeError as e:
        raise SerializationError("Serialization failed", cause=e) from e
    return SerializedView(data=data)


def entry_to_mapping(entry: Any) -> dict[str, Any]:
    """Return the dict form of an entry builder or pass a mapping through."""
    if isinstance(entry, Mapping):
        return dict(entry)
    to_dict = getattr(entry, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    raise SerializationError(
        f"Cannot serialize entry of type {type(entry).__name__}",
    )


def serialize_batch(
    entries: Iterable[Any],
    save_method_name: str | None,
) -> SerializedView:
    """Serialize a batch into the persistence request body."""
    payload = {
        "componentLogEntries": [entry_to_mapping(e) for e in entries],
        "saveMethodName": save_method_name,
    }
    return serialize_mapping_to_json_bytes(payload)


def serialize_entries_to_jsonl(entries: Iterable[Any]) -> bytes:
    """Serialize entries as newline-delimited JSON, one entry per line."""
    lines = [serialize_mapping_to_json_bytes(entry_to_mapping(e)).data for e in entries]
    if not lines:
        return b""
    return b"\n".join(lines) + b"\n"
