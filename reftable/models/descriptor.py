"""
Pydantic Schemas for Reference Table State
==========================================

TableDescriptor is the flattened record a declarative configuration is
parsed into and that every lifecycle operation returns as the new state.

Every optional attribute is an Optional field: None means "absent",
while "" or [] mean "present but empty". The two encode differently on
the wire, so neither is ever replaced by a sentinel.

Enum-typed attributes (source, field type, storage type) are kept as raw
strings here; the mapper validates them on the way in and out.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SchemaField(BaseModel):
    name: str
    type: str


class TableSchema(BaseModel):
    fields: List[SchemaField] = Field(default_factory=list)
    primary_keys: List[str] = Field(default_factory=list)


class AccessDetails(BaseModel):
    type: str
    bucket_name: str
    key_path: str
    region: Optional[str] = None


class LocalFileMetadata(BaseModel):
    """File uploaded through the upload API, referenced by its handle."""

    kind: Literal["local_file"] = "local_file"
    upload_id: str


class CloudStorageMetadata(BaseModel):
    """File read from a cloud storage bucket."""

    kind: Literal["cloud_storage"] = "cloud_storage"
    access_details: AccessDetails


FileMetadata = Annotated[
    Union[LocalFileMetadata, CloudStorageMetadata],
    Field(discriminator="kind"),
]


class TableDescriptor(BaseModel):
    """Flattened configuration/state record for one reference table."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    table_name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    schema_: Optional[TableSchema] = Field(default=None, alias="schema")
    file_metadata: Optional[FileMetadata] = None
    tags: Optional[List[str]] = None

    # Server-computed, read-only
    created_by: Optional[str] = None
    last_updated_by: Optional[str] = None
    row_count: Optional[int] = None
    status: Optional[str] = None
    updated_at: Optional[str] = None

    def to_state(self) -> dict:
        """Plain dict keyed by attribute name, as persisted by the caller."""
        state = self.model_dump(by_alias=True, exclude={"file_metadata"})
        if self.file_metadata is None:
            state["file_metadata"] = None
        else:
            state["file_metadata"] = self.file_metadata.model_dump(exclude={"kind"}, exclude_none=True)
        return state
