# src/taskpad/backends/record_client.py

"""
Thin async HTTP client for the hosted record store.

Wraps httpx.AsyncClient and handles:
- base URL and project/key headers
- request/response JSON
- turning transport errors and non-2xx answers into PersistenceError

It knows nothing about tasks; RemoteTaskBackend does the mapping.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..tasks.errors import PersistenceError

logger = logging.getLogger(__name__)


class RecordStoreClient:
    """Low-level client for one project on the record store."""

    PROJECT_HEADER = "X-Project-Id"
    KEY_HEADER = "X-Public-Key"

    def __init__(
        self,
        base_url: str,
        *,
        project_id: str,
        public_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("record store base URL is required")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={
                "Accept": "application/json",
                self.PROJECT_HEADER: project_id,
                self.KEY_HEADER: public_key,
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _records_path(table: str) -> str:
        return f"/tables/{table}/records"

    async def _request(self, method: str, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, path, json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.info("Record store %s %s -> HTTP %s", method, path, e.response.status_code)
            raise PersistenceError(
                f"Record store answered HTTP {e.response.status_code}."
            ) from e
        except httpx.HTTPError as e:
            logger.info("Record store %s %s failed: %s", method, path, e.__class__.__name__)
            raise PersistenceError("Record store is unreachable. Try again later.") from e

        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            raise PersistenceError("Record store returned a non-JSON response.") from e
        return data if isinstance(data, dict) else {}

    # ---- record operations ----

    async def fetch_records(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", self._records_path(table) + "/query", params)

    async def create_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", self._records_path(table), params)

    async def update_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", self._records_path(table), params)

    async def delete_record(self, table: str, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("DELETE", self._records_path(table), params)
