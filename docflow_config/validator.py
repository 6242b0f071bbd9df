"""
Catalog validator (``docflow_config.validator``).

Responsibility
--------------
Checks a ``WorkflowCatalog`` against the action invariants that the
kernel types deliberately do not enforce at construction.

Invariants checked
------------------
* ``document_type`` is non-empty.
* Action names are non-empty and unique within the catalog.
* Every action has a label and at least one allowed-from status.
* ``destructive`` actions require confirmation.
* Actions requiring confirmation carry a non-empty confirmation message.
* A declared ``initial_status`` is one some action can leave from.

Failure modes
-------------
* Errors (``CatalogValidationResult.errors``) -> the catalog MUST NOT be
  registered.  ``validate_catalog_or_raise`` turns them into a
  ``CatalogValidationError``.
* Warnings -> the catalog is usable but should be reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from docflow_kernel.domain.catalog import ActionVariant, WorkflowCatalog
from docflow_kernel.exceptions import CatalogValidationError


@dataclass
class CatalogValidationResult:
    """
    Result of catalog validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_catalog(catalog: WorkflowCatalog) -> CatalogValidationResult:
    """Validate ``catalog`` and return every error and warning found."""
    result = CatalogValidationResult()

    if not catalog.document_type:
        result.add_error("document_type must be non-empty")

    _validate_name_uniqueness(catalog, result)
    _validate_initial_status(catalog, result)
    for action in catalog.actions:
        _validate_action(action, result)

    return result


def validate_catalog_or_raise(catalog: WorkflowCatalog) -> CatalogValidationResult:
    """Validate ``catalog``; raise ``CatalogValidationError`` on any error."""
    result = validate_catalog(catalog)
    if not result.is_valid:
        raise CatalogValidationError(catalog.document_type, result.errors)
    return result


def _validate_name_uniqueness(catalog: WorkflowCatalog, result: CatalogValidationResult) -> None:
    seen: set[str] = set()
    for action in catalog.actions:
        if action.name in seen:
            result.add_error(f"Duplicate action: {action.name!r} appears more than once")
        seen.add(action.name)


def _validate_initial_status(catalog: WorkflowCatalog, result: CatalogValidationResult) -> None:
    initial = catalog.initial_status
    if initial is None:
        return
    if not catalog.actions_for(initial):
        result.add_error(f"initial_status {initial!r} is not allowed-from for any action")


def _validate_action(action, result: CatalogValidationResult) -> None:
    ref = f"Action {action.name!r}"
    if not action.name:
        result.add_error("Action name must be non-empty")
    if not action.label:
        result.add_error(f"{ref} has no label")
    if not action.allowed_from_statuses:
        result.add_error(f"{ref} has no allowed_from_statuses")
    if action.variant == ActionVariant.DESTRUCTIVE and not action.requires_confirmation:
        result.add_error(f"{ref} is destructive but does not require confirmation")
    if action.requires_confirmation and not action.confirmation_message:
        result.add_error(f"{ref} requires confirmation but has no confirmation_message")
    if action.confirmation_message and not action.requires_confirmation:
        result.add_warning(f"{ref} has a confirmation_message that is never shown")
    if action.target_status is not None and action.target_status in action.allowed_from_statuses:
        result.add_warning(f"{ref} targets a status it is allowed from: {action.target_status!r}")
