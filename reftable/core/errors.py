"""
Error codes for the reference table manager.

ReferenceTableError is the base exception for all structured errors. Every
subclass carries a fixed code of the form RT-<DOMAIN>-NNN so callers and log
processors can branch on it without matching message text.

Usage:
    from reftable.core.errors import NotFound
    raise NotFound(table_name="customers")
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

CODE_PATTERN = re.compile(r"^RT-[A-Z]{3}-\d{3}$")


class ReferenceTableError(Exception):
    """Structured error.

    Args:
        code: Error code, e.g. "RT-MAP-001".
        detail: Human-readable detail message.
        context: Arbitrary key-value context for structured logging.
    """

    def __init__(
        self,
        code: str,
        detail: str | None = None,
        context: dict | None = None,
    ) -> None:
        if not CODE_PATTERN.match(code):
            raise ValueError(f"Invalid error code format: {code!r}")
        self.code = code
        self.detail = detail
        self.context = context or {}
        super().__init__(f"{code}: {detail}" if detail else code)


# ── Mapping ──────────────────────────────────────────────────────────


class InvalidEnumValue(ReferenceTableError):
    """An enum-typed attribute holds a value outside its known set."""

    def __init__(self, field: str, value: object, allowed: Iterable[str]) -> None:
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            "RT-MAP-001",
            detail=f"invalid value {value!r} for {field}; expected one of {', '.join(self.allowed)}",
            context={"field": field, "value": value},
        )


class MissingRequiredUnionVariant(ReferenceTableError):
    """Neither branch of a required union is populated."""

    def __init__(self, field: str, variants: Sequence[str]) -> None:
        self.field = field
        self.variants = list(variants)
        super().__init__(
            "RT-MAP-002",
            detail=f"either {' or '.join(self.variants)} must be specified in {field}",
            context={"field": field},
        )


class UnparsedResponseField(ReferenceTableError):
    """The server returned attributes the mapper does not account for."""

    def __init__(self, fields: Iterable[str], where: str = "data.attributes") -> None:
        self.fields = sorted(fields)
        self.where = where
        super().__init__(
            "RT-MAP-003",
            detail=f"response contains unparsed fields in {where}: {', '.join(self.fields)}",
            context={"fields": self.fields},
        )


# ── Lookup ───────────────────────────────────────────────────────────


class MissingLookupKey(ReferenceTableError):
    def __init__(self) -> None:
        super().__init__("RT-LKP-001", detail="either 'id' or 'table_name' must be specified")


class NotFound(ReferenceTableError):
    """The reference table does not exist (by id or by name)."""

    def __init__(self, table_id: Optional[str] = None, table_name: Optional[str] = None) -> None:
        self.table_id = table_id
        self.table_name = table_name
        if table_name is not None:
            detail = f"could not find a reference table with table_name: {table_name}"
        else:
            detail = f"the reference table with ID {table_id} was not found"
        super().__init__(
            "RT-LKP-002",
            detail=detail,
            context={"table_id": table_id, "table_name": table_name},
        )


# ── API / transport ──────────────────────────────────────────────────


class UnexpectedStatus(ReferenceTableError):
    """A successful response carried a status code the operation does not expect."""

    def __init__(self, operation: str, expected: int, status_code: int) -> None:
        self.operation = operation
        self.expected = expected
        self.status_code = status_code
        super().__init__(
            "RT-API-001",
            detail=f"{operation}: expected {expected}, got {status_code}",
            context={"operation": operation, "status_code": status_code},
        )


class ApiError(ReferenceTableError):
    """The API answered with an error status (4xx/5xx)."""

    def __init__(self, operation: str, status_code: int, body: object = None) -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(
            "RT-API-002",
            detail=f"error {operation}: HTTP {status_code}: {body}",
            context={"operation": operation, "status_code": status_code},
        )


class TransportError(ReferenceTableError):
    """Network or serialization failure underneath an API call."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(
            "RT-API-003",
            detail=f"error {operation}: {cause}",
            context={"operation": operation},
        )
