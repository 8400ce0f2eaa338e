"""
Reference Tables Client: HTTP client for the reference tables API.
===================================================================

Wraps GET/POST/PATCH/DELETE on /api/v2/reference-tables/tables.

No retries: every failure is raised to the caller.
  - network / decode failure  → TransportError
  - HTTP 4xx/5xx              → ApiError (carries status_code)
Status checks on successful responses belong to the lifecycle layer, so
success methods return the status code alongside the parsed body.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from reftable.config import Settings, settings as default_settings
from reftable.core.errors import ApiError, TransportError
from reftable.models.wire import TableListResponse, TableResponse

logger = logging.getLogger(__name__)

TABLES_PATH = "/api/v2/reference-tables/tables"

M = TypeVar("M", bound=BaseModel)


class ReferenceTablesApi(Protocol):
    """What the lifecycle and lookup layers need from a remote client."""

    async def list_tables(self) -> TableListResponse: ...

    async def get_table(self, table_id: str) -> Tuple[TableResponse, int]: ...

    async def create_reference_table(self, payload: dict) -> Tuple[TableResponse, int]: ...

    async def update_reference_table(self, table_id: str, payload: dict) -> int: ...

    async def delete_table(self, table_id: str) -> int: ...


class ReferenceTableClient:
    """Async HTTP client for the reference tables endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        app_key: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        cfg = settings or default_settings
        self._base_url = (base_url or cfg.api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else cfg.request_timeout
        self._headers = {"Accept": "application/json", **cfg.auth_headers()}
        if api_key:
            self._headers["DD-API-KEY"] = api_key
        if app_key:
            self._headers["DD-APPLICATION-KEY"] = app_key

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: Optional[dict] = None,
    ) -> Tuple[int, Optional[Any]]:
        """Make one HTTP request; return (status_code, decoded JSON or None)."""
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, json=json, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error("Reference tables API %s failed: %s %s: %s", operation, method, path, e)
            raise TransportError(operation, e) from e

        status_code = resp.status_code
        if status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            logger.warning("Reference tables API %s returned HTTP %d", operation, status_code)
            raise ApiError(operation, status_code, body)

        if status_code == 204 or not resp.content:
            return status_code, None
        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(operation, e) from e
        return status_code, data

    @staticmethod
    def _parse(model: Type[M], data: Any, operation: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TransportError(operation, e) from e

    async def list_tables(self) -> TableListResponse:
        """GET /api/v2/reference-tables/tables"""
        operation = "listing reference tables"
        _, data = await self._request(operation, "GET", TABLES_PATH)
        return self._parse(TableListResponse, data or {}, operation)

    async def get_table(self, table_id: str) -> Tuple[TableResponse, int]:
        """GET /api/v2/reference-tables/tables/{id}"""
        operation = "retrieving reference table"
        status_code, data = await self._request(operation, "GET", f"{TABLES_PATH}/{table_id}")
        return self._parse(TableResponse, data, operation), status_code

    async def create_reference_table(self, payload: dict) -> Tuple[TableResponse, int]:
        """POST /api/v2/reference-tables/tables"""
        operation = "creating reference table"
        status_code, data = await self._request(operation, "POST", TABLES_PATH, json=payload)
        return self._parse(TableResponse, data, operation), status_code

    async def update_reference_table(self, table_id: str, payload: dict) -> int:
        """PATCH /api/v2/reference-tables/tables/{id}"""
        status_code, _ = await self._request(
            "updating reference table", "PATCH", f"{TABLES_PATH}/{table_id}", json=payload
        )
        return status_code

    async def delete_table(self, table_id: str) -> int:
        """DELETE /api/v2/reference-tables/tables/{id}"""
        status_code, _ = await self._request(
            "deleting reference table", "DELETE", f"{TABLES_PATH}/{table_id}"
        )
        return status_code
