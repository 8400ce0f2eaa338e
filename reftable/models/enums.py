"""Enumerated option values for reference tables."""

from enum import Enum
from typing import List


class ReferenceTableSourceType(str, Enum):
    LOCAL_FILE = "LOCAL_FILE"
    S3 = "S3"
    GCS = "GCS"
    AZURE = "AZURE"


class SchemaFieldType(str, Enum):
    STRING = "STRING"
    DOUBLE = "DOUBLE"
    BOOLEAN = "BOOLEAN"


class StorageType(str, Enum):
    S3 = "s3"
    GCS = "gcs"
    AZURE = "azure"


class ChangeAction(str, Enum):
    CREATE = "create"
    NOOP = "noop"
    UPDATE = "update"
    REPLACE = "replace"


def allowed_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]
