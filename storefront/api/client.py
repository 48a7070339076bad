"""Shared aiohttp plumbing for the backend API gateways."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp

from storefront.core.exceptions import HttpError, MalformedResponseError
from storefront.logging_config import logger


class ApiClient:
    """Lazily opened ``aiohttp.ClientSession`` bound to one API base URL.

    No retries, caching or timeout overrides: one request per call and
    failures go straight back to the caller.
    """

    def __init__(self, base_url: str, *, session: aiohttp.ClientSession | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"Accept": "application/json"})
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        error_message: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """Send one request and decode the JSON body.

        Non-2xx responses raise ``HttpError`` with ``"<error_message>: <status>"``.
        Transport failures raise ``HttpError`` with no status.
        """
        url = self.url(path)
        session = await self._get_session()
        try:
            async with session.request(method, url, params=params, json=json_body) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("%s %s failed with HTTP %s", method, url, resp.status)
                    raise HttpError(resp.status, f"{error_message}: {resp.status}")
                try:
                    return await resp.json(content_type=None)
                except (json.JSONDecodeError, ValueError) as exc:
                    raise MalformedResponseError(f"Invalid JSON from {path}") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise HttpError(None, f"{error_message}: {str(exc) or type(exc).__name__}") from exc
