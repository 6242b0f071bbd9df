"""
Catalog-to-chart projection.

Builds a ``MachineConfig`` from a ``WorkflowCatalog`` so the action-catalog
face can be driven, inspected, and drawn with the chart face's machinery.

Projection rules:

* Every status the catalog mentions becomes a state, labelled by
  title-casing the status (``in_progress`` -> ``In Progress``).
* Every status-changing action contributes one transition per allowed
  source status, keyed by the action name and guarded only by status
  membership, which is implicit in where the transition is declared.
* Side-effect-only actions (no ``target_status``) do not appear.
* A state with no outgoing status-changing transition is final.
"""

from __future__ import annotations

from docflow_kernel.domain.catalog import WorkflowCatalog
from docflow_kernel.domain.chart import ChartTransition, MachineConfig, StateNode


def status_label(status: str) -> str:
    """``in_progress`` -> ``In Progress``."""
    return status.replace("_", " ").title()


def project_catalog(catalog: WorkflowCatalog, initial: str | None = None) -> MachineConfig:
    """Project ``catalog`` onto a chart configuration.

    ``initial`` defaults to the catalog's declared ``initial_status``.
    Catalogs that declare none start from the first entry of
    ``catalog.statuses``.

    Raises:
        ValueError: if the catalog has no actions and no ``initial`` is given.
    """
    statuses = catalog.statuses
    if initial is None:
        initial = catalog.initial_status
    if initial is None:
        if not statuses:
            raise ValueError(f"Cannot project empty catalog {catalog.document_type!r}")
        initial = statuses[0]

    transitions: dict[str, dict[str, ChartTransition]] = {s: {} for s in statuses}
    transitions.setdefault(initial, {})
    for action in catalog.actions:
        if not action.changes_status:
            continue
        for source in sorted(action.allowed_from_statuses):
            transitions[source].setdefault(
                action.name, ChartTransition(target=action.target_status)
            )

    states = {
        status: StateNode(
            label=status_label(status),
            on=on,
            final=not on,
        )
        for status, on in transitions.items()
    }
    return MachineConfig(id=catalog.document_type, initial=initial, states=states)
