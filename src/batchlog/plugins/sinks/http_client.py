"""
HTTP persistence sink built on ``httpx.AsyncClient``.

Each ``save`` POSTs one JSON body::

    {"componentLogEntries": [...], "saveMethodName": "QUEUEABLE"}

Non-2xx responses and transport errors raise ``SaveError`` after emitting a
diagnostic, so the logger can count and report the failure.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core import diagnostics
from ...core.errors import SaveError
from ...core.serialization import serialize_batch
from ..utils import parse_plugin_config

__all__ = ["HttpPersistenceSink", "HttpSinkConfig"]


class HttpSinkConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    endpoint: str
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float = Field(default=10.0, gt=0.0)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Mapping[str, str] | None) -> dict[str, str]:
        if value is None:
            return {}
        return dict(value)


class HttpPersistenceSink:
    """Remote sink that POSTs entry batches to a persistence endpoint."""

    name = "http"

    def __init__(
        self,
        config: HttpSinkConfig | dict | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = parse_plugin_config(HttpSinkConfig, config, **kwargs)
        self._client = client
        self._owns_client = client is None
        self._last_status: int | None = None
        self._last_error: str | None = None

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout_seconds)

    async def stop(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _post(self, body: bytes) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        headers.update(self._config.headers)
        if self._client is not None:
            return await self._client.post(
                self._config.endpoint, content=body, headers=headers
            )
        async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
            return await client.post(
                self._config.endpoint, content=body, headers=headers
            )

    async def save(
        self,
        entries: Sequence[Any],
        save_method_name: str | None,
    ) -> None:
        body = serialize_batch(entries, save_method_name).data
        try:
            resp = await self._post(body)
        except httpx.HTTPError as exc:
            self._last_error = str(exc)
            self._last_status = None
            diagnostics.warn(
                "http-sink",
                "exception while saving batch",
                endpoint=self._config.endpoint,
                error=str(exc),
            )
            raise SaveError(
                "Batch request failed", cause=exc, endpoint=self._config.endpoint
            ) from exc

        self._last_status = resp.status_code
        if resp.status_code >= 400:
            snippet = resp.text[:256]
            self._last_error = f"HTTP {resp.status_code}"
            diagnostics.warn(
                "http-sink",
                "failed to save batch",
                status_code=resp.status_code,
                endpoint=self._config.endpoint,
                body=snippet,
            )
            raise SaveError(
                "Persistence endpoint rejected batch",
                endpoint=self._config.endpoint,
                status_code=resp.status_code,
            )
        self._last_error = None

    async def health_check(self) -> bool:
        return (
            self._last_error is None
            and self._last_status is not None
            and self._last_status < 400
        )
