"""
Action catalog types (``docflow_kernel.domain.catalog``).

Responsibility
--------------
Pure value objects for the action-catalog face of the workflow engine:
one ``WorkflowCatalog`` per document type, holding an ordered tuple of
``WorkflowAction`` records.  Each action names the statuses it may be
performed from and, optionally, the status it moves the document to.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from engines, config, modules, or services.

Invariants (contractual)
------------------------
* Action names are unique within a catalog.
* ``allowed_from_statuses`` is non-empty.
* ``variant == DESTRUCTIVE`` implies ``requires_confirmation``.
* ``requires_confirmation`` implies a non-empty ``confirmation_message``.

These are NOT checked at construction.  ``docflow_config.validator``
reports violations and the test suite asserts every built-in catalog is
clean.

Catalogs are built once at import or load time and shared read-only by
every open page for the document type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActionVariant(str, Enum):
    """Button variant for a workflow action."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    SUCCESS = "success"
    WARNING = "warning"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class WorkflowAction:
    """A named, user-triggerable operation permitted from a set of statuses.

    Contract: frozen.  ``target_status=None`` marks a side-effect action
    (print, duplicate, send email) that does not advance the status.
    """

    name: str
    label: str
    allowed_from_statuses: frozenset[str]
    variant: ActionVariant = ActionVariant.SECONDARY
    target_status: str | None = None
    requires_confirmation: bool = False
    confirmation_message: str | None = None
    icon: str | None = None

    @property
    def changes_status(self) -> bool:
        return self.target_status is not None

    def is_allowed_from(self, status: str) -> bool:
        return status in self.allowed_from_statuses


@dataclass(frozen=True)
class WorkflowCatalog:
    """The ordered action table for one document type.

    Contract: frozen.  Action order drives UI button order, so every
    lookup that returns several actions preserves it.  ``initial_status``
    is the status new documents are created in.
    """

    document_type: str
    actions: tuple[WorkflowAction, ...]
    description: str = ""
    initial_status: str | None = None

    def get_action(self, name: str) -> WorkflowAction | None:
        """Return the action called ``name``, or None."""
        for action in self.actions:
            if action.name == name:
                return action
        return None

    def actions_for(self, status: str) -> tuple[WorkflowAction, ...]:
        """All actions allowed from ``status``, in catalog order."""
        return tuple(a for a in self.actions if a.is_allowed_from(status))

    @property
    def action_names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.actions)

    @property
    def statuses(self) -> tuple[str, ...]:
        """Every status the catalog mentions, in first-seen order.

        The declared ``initial_status`` comes first when there is one.

        Allowed-from statuses are sorted within each action so the order is
        stable regardless of set iteration.
        """
        seen: dict[str, None] = {}
        if self.initial_status is not None:
            seen[self.initial_status] = None
        for action in self.actions:
            for status in sorted(action.allowed_from_statuses):
                seen.setdefault(status, None)
            if action.target_status is not None:
                seen.setdefault(action.target_status, None)
        return tuple(seen)
