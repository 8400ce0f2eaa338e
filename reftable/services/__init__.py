from .reference_table_client import ReferenceTableClient, ReferenceTablesApi
from .table_lifecycle import ReferenceTableLifecycle, apply_change
from .table_lookup import ReferenceTableLookup

__all__ = [
    "ReferenceTableClient",
    "ReferenceTablesApi",
    "ReferenceTableLifecycle",
    "ReferenceTableLookup",
    "apply_change",
]
