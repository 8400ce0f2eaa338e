"""
Declarative attribute schema for the reference table resource and data source.

Each attribute records how it is managed: required/optional configuration,
server-computed, whether a change forces destroy-and-recreate, and whether
its prior value is kept while the server has not reported a new one.
"""
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Attribute:
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    requires_replace: bool = False
    use_state_for_unknown: bool = False
    # Write-only: never recovered by a read, so skipped when verifying an import
    write_only: bool = False


RESOURCE_ATTRIBUTES: Dict[str, Attribute] = {
    "id": Attribute("The ID of this resource.", computed=True, use_state_for_unknown=True),
    "table_name": Attribute(
        "Unique name to identify this reference table. Used in enrichment processors and API calls.",
        required=True,
        requires_replace=True,
    ),
    "description": Attribute(
        "Optional text describing the purpose or contents of this reference table.",
        optional=True,
    ),
    "source": Attribute(
        "The source type for reference table data. Valid values are `LOCAL_FILE`, `S3`, `GCS`, `AZURE`.",
        required=True,
        requires_replace=True,
    ),
    "schema": Attribute(
        "Schema defining the structure and columns of the reference table.",
        required=True,
    ),
    "schema.fields": Attribute("List of fields (columns) in the reference table.", required=True),
    "schema.fields.name": Attribute("Name of the column.", required=True),
    "schema.fields.type": Attribute(
        "Data type of the column. Valid values are `STRING`, `DOUBLE`, `BOOLEAN`.",
        required=True,
    ),
    "schema.primary_keys": Attribute(
        "List of field names that serve as primary keys for the table. Only one primary key is supported.",
        required=True,
    ),
    "file_metadata": Attribute(
        "Metadata specifying where and how to access the reference table's data file.",
        required=True,
        write_only=True,
    ),
    "file_metadata.upload_id": Attribute(
        "Upload ID obtained from creating a reference table upload. Use this for LOCAL_FILE source type.",
        optional=True,
        requires_replace=True,
        write_only=True,
    ),
    "file_metadata.access_details": Attribute(
        "Details for accessing a file in cloud storage. Use this for S3, GCS, or AZURE source types.",
        optional=True,
        write_only=True,
    ),
    "file_metadata.access_details.type": Attribute(
        "Type of cloud storage. Valid values are `s3`, `gcs`, `azure`.", required=True
    ),
    "file_metadata.access_details.region": Attribute(
        "Region where the bucket is located (for S3).", optional=True
    ),
    "file_metadata.access_details.bucket_name": Attribute("Name of the storage bucket.", required=True),
    "file_metadata.access_details.key_path": Attribute(
        "Path to the CSV file within the bucket.", required=True
    ),
    "tags": Attribute("Tags for organizing and filtering reference tables.", optional=True),
    "created_by": Attribute(
        "UUID of the user who created the reference table.",
        computed=True,
        use_state_for_unknown=True,
    ),
    "last_updated_by": Attribute("UUID of the user who last updated the reference table.", computed=True),
    "row_count": Attribute("The number of successfully processed rows in the reference table.", computed=True),
    "status": Attribute("The processing status of the table.", computed=True),
    "updated_at": Attribute("When the reference table was last updated, in ISO 8601 format.", computed=True),
}

DATA_SOURCE_ATTRIBUTES: Dict[str, Attribute] = {
    "id": Attribute("The ID of the reference table.", optional=True, computed=True),
    "table_name": Attribute(
        "Unique name to identify this reference table. Required if `id` is not specified.",
        optional=True,
        computed=True,
    ),
    **{
        name: Attribute(attr.description, computed=True)
        for name, attr in RESOURCE_ATTRIBUTES.items()
        if name not in ("id", "table_name") and not attr.write_only
        and not name.startswith("file_metadata")
    },
}


def top_level(attributes: Dict[str, Attribute]) -> Dict[str, Attribute]:
    return {name: attr for name, attr in attributes.items() if "." not in name}


def replace_triggers(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    """Attribute paths whose change forces destroy-and-recreate."""
    return tuple(name for name, attr in attributes.items() if attr.requires_replace)


def import_verify_ignore(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    """Top-level attributes a read cannot reproduce after an import."""
    return tuple(name for name, attr in top_level(attributes).items() if attr.write_only)


def computed_attributes(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    return tuple(
        name for name, attr in top_level(attributes).items()
        if attr.computed and not attr.optional and not attr.required
    )


def updatable_attributes(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    """Configurable top-level attributes that change in place."""
    return tuple(
        name for name, attr in top_level(attributes).items()
        if (attr.required or attr.optional) and not attr.requires_replace and not attr.write_only
    )


def cleared_when_omitted(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    """Optional configured attributes a response clears by omitting them."""
    return tuple(
        name for name, attr in top_level(attributes).items()
        if attr.optional and not attr.computed and not attr.write_only
    )


def state_for_unknown(attributes: Dict[str, Attribute] = RESOURCE_ATTRIBUTES) -> Tuple[str, ...]:
    """Attributes carried over from prior state until the server reports them."""
    return tuple(name for name, attr in top_level(attributes).items() if attr.use_state_for_unknown)
