"""
Change Planner
==============

Classifies a (prior state, desired configuration) pair into the action the
lifecycle must take:

  CREATE   no prior state
  REPLACE  a replace-on-change attribute differs (destroy, then create)
  UPDATE   only in-place attributes differ
  NOOP     nothing configurable differs

Replace-on-change and in-place attributes come from the attribute schema,
so this module never names individual attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from reftable.models.attributes import (
    RESOURCE_ATTRIBUTES,
    replace_triggers,
    updatable_attributes,
)
from reftable.models.descriptor import TableDescriptor
from reftable.models.enums import ChangeAction


@dataclass(frozen=True)
class PlannedChange:
    action: ChangeAction
    replace_reasons: Tuple[str, ...] = ()
    changed: Tuple[str, ...] = ()

    @property
    def requires_replace(self) -> bool:
        return self.action is ChangeAction.REPLACE


def _lookup(state: Mapping[str, Any], path: str) -> Any:
    value: Any = state
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def plan_change(prior: Optional[TableDescriptor], desired: TableDescriptor) -> PlannedChange:
    if prior is None:
        return PlannedChange(ChangeAction.CREATE)

    before = prior.to_state()
    after = desired.to_state()

    replace_reasons = []
    for path in replace_triggers():
        old, new = _lookup(before, path), _lookup(after, path)
        # Write-only values are unknown after an import; not a change.
        if old is None and RESOURCE_ATTRIBUTES[path].write_only:
            continue
        if old != new:
            replace_reasons.append(path)

    changed = tuple(
        name for name in updatable_attributes() if before.get(name) != after.get(name)
    )

    if replace_reasons:
        return PlannedChange(ChangeAction.REPLACE, tuple(replace_reasons), changed)
    if changed:
        return PlannedChange(ChangeAction.UPDATE, (), changed)
    return PlannedChange(ChangeAction.NOOP)
