"""Declarative management of reference tables through the platform REST API."""

from reftable.models.descriptor import TableDescriptor
from reftable.services import (
    ReferenceTableClient,
    ReferenceTableLifecycle,
    ReferenceTableLookup,
    apply_change,
)
from reftable.services.change_planner import plan_change
from reftable.services.table_mapper import parse_config

__all__ = [
    "TableDescriptor",
    "ReferenceTableClient",
    "ReferenceTableLifecycle",
    "ReferenceTableLookup",
    "apply_change",
    "plan_change",
    "parse_config",
]
