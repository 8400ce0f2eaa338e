"""
Pytest configuration for reftable tests.
Sets environment variables before any reftable import so Settings picks them up.
"""

import os
from unittest.mock import AsyncMock

# Must be set before reftable.config is imported
os.environ.setdefault("REFTABLE_API_URL", "https://api.test.example")
os.environ.setdefault("REFTABLE_API_KEY", "test_api_key")
os.environ.setdefault("REFTABLE_APP_KEY", "test_app_key")

import pytest

from reftable.models.wire import TableListResponse, TableResponse


def table_payload(table_id="tbl-1", **attributes):
    """JSON:API body for one table, as the server returns it."""
    return {"data": {"id": table_id, "type": "reference_table", "attributes": attributes}}


SAMPLE_ATTRIBUTES = {
    "table_name": "t1",
    "description": "Test reference table",
    "source": "S3",
    "schema": {
        "fields": [
            {"name": "id", "type": "STRING"},
            {"name": "value", "type": "DOUBLE"},
        ],
        "primary_keys": ["id"],
    },
    "tags": ["env:test", "team:platform"],
    "created_by": "00000000-0000-0000-0000-000000000001",
    "last_updated_by": "00000000-0000-0000-0000-000000000001",
    "row_count": 0,
    "status": "INITIALIZING",
    "updated_at": "2026-10-01T12:00:00Z",
}

SAMPLE_CONFIG = {
    "table_name": "t1",
    "source": "S3",
    "schema": {
        "fields": [
            {"name": "id", "type": "STRING"},
            {"name": "value", "type": "DOUBLE"},
        ],
        "primary_keys": ["id"],
    },
    "file_metadata": {
        "access_details": {"type": "s3", "bucket_name": "b", "key_path": "p"},
    },
}


def table_response(table_id="tbl-1", **attributes) -> TableResponse:
    return TableResponse.model_validate(table_payload(table_id, **attributes))


def table_listing(*names) -> TableListResponse:
    return TableListResponse.model_validate({
        "data": [
            {"id": f"id-{name}", "type": "reference_table", "attributes": {"table_name": name}}
            for name in names
        ]
    })


@pytest.fixture
def api():
    """AsyncMock standing in for ReferenceTablesApi."""
    mock = AsyncMock()
    mock.create_reference_table.return_value = (table_response(**SAMPLE_ATTRIBUTES), 200)
    mock.get_table.return_value = (table_response(**SAMPLE_ATTRIBUTES), 200)
    mock.update_reference_table.return_value = 200
    mock.delete_table.return_value = 200
    mock.list_tables.return_value = table_listing()
    return mock
