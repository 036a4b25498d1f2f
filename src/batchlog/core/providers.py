"""
Settings providers supplying the per-user settings snapshot.

A provider is anything with ``async fetch() -> ComponentLoggerSettings``.
Payloads are validated into ``ComponentLoggerSettings`` here, at the
boundary, and failures are raised as ``SettingsFetchError`` for the logger
to contain.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from .errors import SettingsFetchError
from .settings import ComponentLoggerSettings


@runtime_checkable
class SettingsProvider(Protocol):
    async def fetch(self) -> ComponentLoggerSettings:  # pragma: no cover
        ...


def parse_settings(payload: Any) -> ComponentLoggerSettings:
    """Validate a raw payload into a settings snapshot."""
    if isinstance(payload, ComponentLoggerSettings):
        return payload
    try:
        return ComponentLoggerSettings.model_validate(payload)
    except ValidationError as e:
        raise SettingsFetchError("Invalid settings payload", cause=e) from e


class StaticSettingsProvider:
    """Serves a fixed snapshot; useful for tests and offline hosts."""

    name = "static"

    def __init__(
        self, settings: ComponentLoggerSettings | Mapping[str, Any]
    ) -> None:
        self._settings = parse_settings(settings)

    async def fetch(self) -> ComponentLoggerSettings:
        return self._settings


class HttpSettingsProvider:
    """Fetches the snapshot from a JSON endpoint with ``httpx``."""

    name = "http"

    def __init__(
        self,
        endpoint: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._headers = dict(headers or {})
        self._timeout = timeout_seconds
        self._client = client

    async def fetch(self) -> ComponentLoggerSettings:
        try:
            if self._client is not None:
                resp = await self._client.get(self._endpoint, headers=self._headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(self._endpoint, headers=self._headers)
        except httpx.HTTPError as e:
            raise SettingsFetchError(
                "Settings request failed", cause=e, endpoint=self._endpoint
            ) from e
        if resp.status_code >= 400:
            raise SettingsFetchError(
                "Settings endpoint returned an error",
                endpoint=self._endpoint,
                status_code=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise SettingsFetchError(
                "Settings response is not JSON", cause=e, endpoint=self._endpoint
            ) from e
        return parse_settings(payload)
