"""
Reference Table Lifecycle
=========================

Create / Read / Update / Delete / Import for one reference table, composed
from the table mapper and an injected ReferenceTablesApi.

State machine per table:
    absent -> creating -> present -> updating -> present -> deleting -> absent
    present -> reading -> present   (or -> absent on 404)

Every method returns the new state or raises; a failed operation never
returns partial state, so the caller keeps what it had.

Replace decisions are not made here. update() trusts that a change to a
replace-on-change attribute was already turned into delete + create by the
caller (see change_planner and apply_change below).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from reftable.core.errors import ApiError, NotFound, UnexpectedStatus
from reftable.core.structured_logging import operation_context
from reftable.models.attributes import (
    RESOURCE_ATTRIBUTES,
    import_verify_ignore,
    state_for_unknown,
    top_level,
)
from reftable.models.descriptor import TableDescriptor
from reftable.models.enums import ChangeAction
from reftable.services.change_planner import plan_change
from reftable.services.reference_table_client import ReferenceTablesApi
from reftable.services.table_mapper import decode, encode_create, encode_update

logger = logging.getLogger(__name__)

EXPECTED_STATUS = 200


def _require_id(state: TableDescriptor) -> str:
    if not state.id:
        raise ValueError("reference table state has no id")
    return state.id


class ReferenceTableLifecycle:
    """Lifecycle operations against one ReferenceTablesApi handle."""

    def __init__(self, api: ReferenceTablesApi):
        self._api = api

    async def create(self, desired: TableDescriptor) -> TableDescriptor:
        """Encode, submit, and decode the created table (including computed fields).

        If the POST succeeds but its response cannot be decoded, the remote
        table may exist without being recorded; nothing is rolled back.
        """
        with operation_context("create"):
            payload = encode_create(desired)
            response, status_code = await self._api.create_reference_table(payload)
            if status_code != EXPECTED_STATUS:
                raise UnexpectedStatus("creating reference table", EXPECTED_STATUS, status_code)

            state = decode(response, prior=desired)
            logger.info("Created reference table %s (%s)", state.id, state.table_name)
            return state

    async def read(self, state: TableDescriptor) -> Optional[TableDescriptor]:
        """Refresh ``state`` from the server. Returns None when the table is gone."""
        table_id = _require_id(state)
        with operation_context("read", table_id):
            try:
                response, _ = await self._api.get_table(table_id)
            except ApiError as e:
                if e.status_code == 404:
                    logger.info("Reference table %s no longer exists; removing from state", table_id)
                    return None
                raise
            return decode(response, prior=state)

    async def update(self, desired: TableDescriptor) -> TableDescriptor:
        """Patch schema/description/tags, then re-read for computed fields."""
        table_id = _require_id(desired)
        with operation_context("update", table_id):
            payload = encode_update(desired)
            status_code = await self._api.update_reference_table(table_id, payload)
            if status_code != EXPECTED_STATUS:
                raise UnexpectedStatus("updating reference table", EXPECTED_STATUS, status_code)

            # The patch response is not a complete table; read it back.
            response, _ = await self._api.get_table(table_id)
            state = decode(response, prior=desired)
            logger.info("Updated reference table %s", table_id)
            return state

    async def delete(self, state: TableDescriptor) -> None:
        table_id = _require_id(state)
        with operation_context("delete", table_id):
            try:
                await self._api.delete_table(table_id)
            except ApiError as e:
                if e.status_code == 404:
                    logger.info("Reference table %s already deleted", table_id)
                    return
                raise
            logger.info("Deleted reference table %s", table_id)

    def import_state(self, table_id: str) -> TableDescriptor:
        """Seed state from an id alone; read() fills in the rest."""
        return TableDescriptor(id=table_id)

    async def import_and_read(self, table_id: str) -> TableDescriptor:
        state = await self.read(self.import_state(table_id))
        if state is None:
            raise NotFound(table_id=table_id)
        return state

    @staticmethod
    def verify_import(imported: TableDescriptor, managed: TableDescriptor) -> List[str]:
        """Attributes that differ between an imported and a managed record.

        Write-only attributes (file_metadata) cannot come back from a read
        and are skipped.
        """
        ignore = set(import_verify_ignore())
        before, after = imported.to_state(), managed.to_state()
        return [
            name for name in top_level(RESOURCE_ATTRIBUTES)
            if name not in ignore and before.get(name) != after.get(name)
        ]


async def apply_change(
    lifecycle: ReferenceTableLifecycle,
    prior: Optional[TableDescriptor],
    desired: TableDescriptor,
) -> TableDescriptor:
    """Plan the change from ``prior`` to ``desired`` and carry it out."""
    plan = plan_change(prior, desired)
    logger.info(
        "Planned %s for reference table %s",
        plan.action.value,
        desired.table_name,
        extra={"replace_reasons": list(plan.replace_reasons), "changed": list(plan.changed)},
    )

    if plan.action is ChangeAction.CREATE:
        return await lifecycle.create(desired)
    if plan.action is ChangeAction.REPLACE:
        await lifecycle.delete(prior)
        return await lifecycle.create(desired.model_copy(update={"id": None}))
    if plan.action is ChangeAction.UPDATE:
        carried = {name: getattr(prior, name) for name in state_for_unknown()}
        return await lifecycle.update(desired.model_copy(update=carried))
    return prior
