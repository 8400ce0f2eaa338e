"""
Reference Table Lookup: read-only resolution by id or table_name.

An id is used as-is. A table_name is resolved by listing every table and
taking the first exact match in listing order; uniqueness of names is left
to the server and not checked here.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from reftable.core.errors import ApiError, MissingLookupKey, NotFound
from reftable.core.structured_logging import operation_context
from reftable.models.attributes import DATA_SOURCE_ATTRIBUTES
from reftable.models.descriptor import TableDescriptor
from reftable.services.reference_table_client import ReferenceTablesApi
from reftable.services.table_mapper import check_list_unparsed, decode, project

logger = logging.getLogger(__name__)


class ReferenceTableLookup:
    def __init__(self, api: ReferenceTablesApi):
        self._api = api

    async def resolve_id(self, table_id: Optional[str] = None, table_name: Optional[str] = None) -> str:
        if table_id is not None:
            return table_id

        if table_name is None:
            raise MissingLookupKey()

        listing = await self._api.list_tables()
        check_list_unparsed(listing)
        for table in listing.data:
            attrs = table.attributes
            if attrs is not None and attrs.has("table_name") and attrs.table_name == table_name:
                logger.debug("Resolved reference table %r to %s", table_name, table.id)
                return table.id

        raise NotFound(table_name=table_name)

    async def read(self, table_id: Optional[str] = None, table_name: Optional[str] = None) -> TableDescriptor:
        """Resolve and fetch the table. A missing table is always an error here."""
        with operation_context("lookup", table_id):
            resolved = await self.resolve_id(table_id=table_id, table_name=table_name)
            try:
                response, _ = await self._api.get_table(resolved)
            except ApiError as e:
                if e.status_code == 404:
                    raise NotFound(table_id=resolved) from e
                raise
            return project(decode(response), DATA_SOURCE_ATTRIBUTES)

    async def read_config(self, config: Mapping[str, Any]) -> TableDescriptor:
        """Data source entry point: ``config`` carries ``id`` and/or ``table_name``."""
        return await self.read(table_id=config.get("id"), table_name=config.get("table_name"))
