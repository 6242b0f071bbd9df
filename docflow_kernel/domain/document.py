"""
Document and mutation contracts (``docflow_kernel.domain.document``).

The dispatcher reads two fields from a document, ``id`` and ``status``,
and never writes either.  Documents may be plain objects or mappings.
Persistence is supplied per action name as a ``WorkflowMutation``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


def get_field(document: Any, key: str, default: Any = None) -> Any:
    """Get a field from a document (object or mapping)."""
    if document is None:
        return default
    if hasattr(document, "get") and callable(getattr(document, "get")):
        return document.get(key, default)
    return getattr(document, key, default)


def document_status(document: Any) -> str:
    """Status of ``document``, or ``""`` when there is no document."""
    status = get_field(document, "status")
    return "" if status is None else str(status)


@dataclass(frozen=True)
class MutationParams:
    """Arguments passed to ``WorkflowMutation.mutate_async``."""

    id: int | str
    payload: Any = None


@runtime_checkable
class WorkflowMutation(Protocol):
    """Persistence call for one workflow action.

    ``mutate_async`` returns the updated document; ``is_pending`` is true
    while a call is outstanding.
    """

    is_pending: bool

    async def mutate_async(self, params: MutationParams) -> Any:
        ...
