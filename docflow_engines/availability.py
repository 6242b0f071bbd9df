"""
Availability and guard evaluation for action catalogs.

Pure functions: (catalog, status) -> currently legal actions.  Results are
recomputed on every call; catalogs hold fewer than twenty actions, so
there is nothing to cache.

An unknown action name or a status with no actions is a normal answer
(``False`` / empty tuple), never an exception.
"""

from __future__ import annotations

from docflow_kernel.domain.catalog import WorkflowAction, WorkflowCatalog

REASON_UNKNOWN_ACTION = "unknown_action"
REASON_NOT_ALLOWED = "not_allowed_from_status"


def available_actions(catalog: WorkflowCatalog, status: str) -> tuple[WorkflowAction, ...]:
    """Actions allowed from ``status``, in catalog order."""
    return catalog.actions_for(status)


def can_execute(catalog: WorkflowCatalog, status: str, name: str) -> bool:
    """True iff ``name`` exists in the catalog and is allowed from ``status``."""
    if catalog.get_action(name) is None:
        return False
    return any(a.name == name for a in available_actions(catalog, status))


def blocking_reason(catalog: WorkflowCatalog, status: str, name: str) -> str | None:
    """Why ``name`` cannot run from ``status``, or None when it can."""
    action = catalog.get_action(name)
    if action is None:
        return REASON_UNKNOWN_ACTION
    if not action.is_allowed_from(status):
        return REASON_NOT_ALLOWED
    return None
