"""
Wire models for the reference tables API (JSON:API envelopes).

Response models accept unknown keys (extra="allow") instead of rejecting
them, so the mapper can report exactly which keys it did not account for.
Presence of optional attributes is read from ``model_fields_set``: a key
the server omitted is never confused with one it sent as null.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

REFERENCE_TABLE_TYPE = "reference_table"


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class WireSchemaField(_Lenient):
    name: str
    type: str


class WireSchema(_Lenient):
    fields: List[WireSchemaField] = Field(default_factory=list)
    primary_keys: List[str] = Field(default_factory=list)


class TableAttributes(_Lenient):
    table_name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    schema_: Optional[WireSchema] = Field(default=None, alias="schema")
    # Echoed back by the server in a shape that differs from the request;
    # accepted but never mapped into state.
    file_metadata: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    created_by: Optional[str] = None
    last_updated_by: Optional[str] = None
    row_count: Optional[int] = None
    status: Optional[str] = None
    updated_at: Optional[str] = None

    def has(self, name: str) -> bool:
        """True when the server sent the attribute with a non-null value."""
        return name in self.model_fields_set and getattr(self, name) is not None


class TableData(_Lenient):
    id: str
    type: str = REFERENCE_TABLE_TYPE
    attributes: Optional[TableAttributes] = None


class TableResponse(_Lenient):
    data: TableData


class TableListResponse(_Lenient):
    data: List[TableData] = Field(default_factory=list)
