"""Key-value store clients.

``RedisRestStore`` talks to an Upstash-style Redis REST endpoint: every command
is a JSON array POSTed to the base URL, and the reply is ``{"result": ...}`` or
``{"error": "..."}``. ``InMemoryKVStore`` has the same interface and backs the
tests.
"""
import asyncio
import logging
from typing import Any, Protocol

import httpx

from app.utils.exceptions import StoreError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def set_if_absent(self, key: str, value: str) -> bool: ...


class RedisRestStore:
    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url or not token:
            raise ValueError("KV store URL and token are required")
        self._url = url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"}
        self._timeout = timeout
        self._transport = transport

    async def get(self, key: str) -> str | None:
        result = await self._command("GET", key)
        if result is not None and not isinstance(result, str):
            raise StoreError("KV operation failed", details="unexpected GET result type")
        return result

    async def set(self, key: str, value: str) -> None:
        await self._command("SET", key, value)

    async def set_if_absent(self, key: str, value: str) -> bool:
        # SET NX replies "OK" when written and null when the key already exists
        return await self._command("SET", key, value, "NX") == "OK"

    async def _command(self, *args: str) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, headers=self._headers, json=list(args))
        except httpx.HTTPError as e:
            logger.error("KV %s request failed: %s", args[0], e)
            raise StoreError("KV operation failed", details=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("KV %s returned a non-JSON body (status %d)", args[0], response.status_code)
            raise StoreError("KV operation failed", details="malformed response body") from e

        if not isinstance(data, dict):
            raise StoreError("KV operation failed", details="malformed response body")
        if response.is_error or data.get("error"):
            message = data.get("error") or f"HTTP {response.status_code}"
            logger.error("KV %s failed: %s", args[0], message)
            raise StoreError("KV operation failed", details=message)
        if "result" not in data:
            raise StoreError("KV operation failed", details="response has no result")
        return data["result"]


class InMemoryKVStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def set_if_absent(self, key: str, value: str) -> bool:
        async with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
            return True
