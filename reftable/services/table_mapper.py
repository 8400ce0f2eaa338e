"""
Table Mapper: TableDescriptor <-> reference tables wire format.
================================================================

Every "is this attribute set" branch lives here:

  parse_config   declarative configuration mapping  -> TableDescriptor
  encode_create  TableDescriptor                    -> create request body
  encode_update  TableDescriptor                    -> patch request body
  decode         TableResponse (+ prior state)      -> TableDescriptor

Outbound, unset optional attributes are omitted (never sent as "" or []).
Inbound, an optional attribute the server omits (description, tags) is set
to None on the new state rather than keeping the prior value; required and
computed attributes keep their prior value until the server reports one.
Which attribute is which comes from the attribute schema. Unknown response
keys raise UnparsedResponseField.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from reftable.core.errors import (
    InvalidEnumValue,
    MissingRequiredUnionVariant,
    UnparsedResponseField,
)
from reftable.models.attributes import (
    Attribute,
    cleared_when_omitted,
    computed_attributes,
    top_level,
)
from reftable.models.descriptor import (
    AccessDetails,
    CloudStorageMetadata,
    LocalFileMetadata,
    SchemaField,
    TableDescriptor,
    TableSchema,
)
from reftable.models.enums import (
    ReferenceTableSourceType,
    SchemaFieldType,
    StorageType,
    allowed_values,
)
from reftable.models.wire import (
    REFERENCE_TABLE_TYPE,
    TableData,
    TableListResponse,
    TableResponse,
    WireSchema,
)

logger = logging.getLogger(__name__)

FILE_METADATA_VARIANTS = ("upload_id", "access_details")


def _field_name(attribute: str) -> str:
    """TableDescriptor field for a top-level attribute name."""
    return "schema_" if attribute == "schema" else attribute


def _check_enum(field: str, value: Any, enum_cls) -> str:
    allowed = allowed_values(enum_cls)
    if value not in allowed:
        raise InvalidEnumValue(field, value, allowed)
    return value


def _require(descriptor: TableDescriptor, name: str) -> Any:
    value = getattr(descriptor, name)
    if value is None:
        raise ValueError(f"{name.rstrip('_')} is required")
    return value


# ── Configuration ────────────────────────────────────────────────────


def parse_file_metadata(raw: Optional[Mapping[str, Any]]):
    """Pick the file metadata variant: upload_id first, then access_details.

    Returns None when neither is set; encode_create reports that.
    """
    if not raw:
        return None
    if raw.get("upload_id") is not None:
        return LocalFileMetadata(upload_id=raw["upload_id"])
    if raw.get("access_details") is not None:
        return CloudStorageMetadata(access_details=AccessDetails(**raw["access_details"]))
    return None


def parse_config(config: Mapping[str, Any]) -> TableDescriptor:
    """Build a descriptor from a configuration (or persisted state) mapping."""
    schema = config.get("schema")
    tags = config.get("tags")
    return TableDescriptor(
        id=config.get("id"),
        table_name=config.get("table_name"),
        description=config.get("description"),
        source=config.get("source"),
        schema=(
            TableSchema(
                fields=[SchemaField(**f) for f in schema.get("fields") or []],
                primary_keys=list(schema.get("primary_keys") or []),
            )
            if schema is not None
            else None
        ),
        file_metadata=parse_file_metadata(config.get("file_metadata")),
        tags=list(tags) if tags is not None else None,
        created_by=config.get("created_by"),
        last_updated_by=config.get("last_updated_by"),
        row_count=config.get("row_count"),
        status=config.get("status"),
        updated_at=config.get("updated_at"),
    )


# ── Outbound ─────────────────────────────────────────────────────────


def encode_schema(schema: TableSchema) -> Dict[str, Any]:
    fields = []
    for i, field in enumerate(schema.fields):
        fields.append({
            "name": field.name,
            "type": _check_enum(f"schema.fields[{i}].type", field.type, SchemaFieldType),
        })
    return {"fields": fields, "primary_keys": list(schema.primary_keys)}


def encode_file_metadata(file_metadata) -> Dict[str, Any]:
    if isinstance(file_metadata, LocalFileMetadata):
        return {"upload_id": file_metadata.upload_id}
    if isinstance(file_metadata, CloudStorageMetadata):
        details = file_metadata.access_details
        access_details = {
            "type": _check_enum("file_metadata.access_details.type", details.type, StorageType),
            "bucket_name": details.bucket_name,
            "key_path": details.key_path,
        }
        if details.region is not None:
            access_details["region"] = details.region
        return {"access_details": access_details, "sync_enabled": True}
    raise MissingRequiredUnionVariant("file_metadata", FILE_METADATA_VARIANTS)


def encode_create(descriptor: TableDescriptor) -> Dict[str, Any]:
    """Create request body. Raises InvalidEnumValue / MissingRequiredUnionVariant."""
    attributes: Dict[str, Any] = {
        "table_name": _require(descriptor, "table_name"),
        "source": _check_enum("source", _require(descriptor, "source"), ReferenceTableSourceType),
        "schema": encode_schema(_require(descriptor, "schema_")),
        "file_metadata": encode_file_metadata(descriptor.file_metadata),
    }
    if descriptor.description is not None:
        attributes["description"] = descriptor.description
    if descriptor.tags is not None:
        attributes["tags"] = list(descriptor.tags)

    return {"data": {"type": REFERENCE_TABLE_TYPE, "attributes": attributes}}


def encode_update(descriptor: TableDescriptor) -> Dict[str, Any]:
    """Patch request body: schema, description and tags only.

    table_name, source and file_metadata are write-once and never sent.
    """
    attributes: Dict[str, Any] = {}
    if descriptor.schema_ is not None:
        attributes["schema"] = encode_schema(descriptor.schema_)
    if descriptor.description is not None:
        attributes["description"] = descriptor.description
    if descriptor.tags is not None:
        attributes["tags"] = list(descriptor.tags)

    return {"data": {"type": REFERENCE_TABLE_TYPE, "attributes": attributes}}


# ── Inbound ──────────────────────────────────────────────────────────


def unparsed_fields(data: TableData) -> List[str]:
    """Dotted paths of attribute keys the wire models did not recognize."""
    attrs = data.attributes
    if attrs is None:
        return []
    found = list(attrs.model_extra or {})
    if attrs.schema_ is not None:
        found += [f"schema.{k}" for k in attrs.schema_.model_extra or {}]
        for i, field in enumerate(attrs.schema_.fields):
            found += [f"schema.fields[{i}].{k}" for k in field.model_extra or {}]
    return found


def check_unparsed(data: TableData) -> None:
    found = unparsed_fields(data)
    if found:
        logger.error("Reference table %s response has unparsed fields: %s", data.id, found)
        raise UnparsedResponseField(found)


def check_list_unparsed(listing: TableListResponse) -> None:
    for data in listing.data:
        check_unparsed(data)


def decode_schema(schema: WireSchema) -> TableSchema:
    return TableSchema(
        fields=[
            SchemaField(
                name=field.name,
                type=_check_enum(f"schema.fields[{i}].type", field.type, SchemaFieldType),
            )
            for i, field in enumerate(schema.fields)
        ],
        primary_keys=list(schema.primary_keys),
    )


def decode(response: TableResponse, prior: Optional[TableDescriptor] = None) -> TableDescriptor:
    """Map a table response onto a copy of ``prior``.

    Attributes only configuration carries (file_metadata) are kept from
    ``prior``. Required and computed attributes are replaced when present.
    Optional attributes are replaced, or set to None when omitted. A
    response without attributes only updates the id.
    """
    data = response.data
    check_unparsed(data)

    attrs = data.attributes
    updates: Dict[str, Any] = {"id": data.id}

    if attrs is not None:
        for name in cleared_when_omitted():
            value = getattr(attrs, name) if attrs.has(name) else None
            updates[_field_name(name)] = list(value) if isinstance(value, list) else value
        for name in computed_attributes():
            if name != "id" and attrs.has(name):
                updates[name] = getattr(attrs, name)

        if attrs.has("table_name"):
            updates["table_name"] = attrs.table_name
        if attrs.has("source"):
            updates["source"] = _check_enum("source", attrs.source, ReferenceTableSourceType)
        if attrs.has("schema_"):
            updates["schema_"] = decode_schema(attrs.schema_)

    base = prior if prior is not None else TableDescriptor()
    return base.model_copy(deep=True, update=updates)


def project(descriptor: TableDescriptor, attributes: Dict[str, Attribute]) -> TableDescriptor:
    """Copy of ``descriptor`` with every attribute outside ``attributes`` cleared."""
    keep = {_field_name(name) for name in top_level(attributes)}
    return descriptor.model_copy(
        update={name: None for name in TableDescriptor.model_fields if name not in keep}
    )
