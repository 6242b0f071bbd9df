"""
Docflow Modules.

Declarative per-document workflow definitions over the kernel types.
Each module contains:
- Action catalog (status -> user-visible actions)
- Chart configuration (guarded state machine), where the document needs one

Modules:
- Quotation: draft, approval, conversion to invoice (catalog + chart)
- Invoice: sending, payments, overdue tracking (catalog + chart)
- Bill: vendor bills, approval, payment (catalog)
- Purchase order: approval, ordering, receiving (catalog + chart)
- Work order: scheduling, hold, completion (catalog)
- Solar proposal: customer proposals (catalog)

Availability and dispatch logic lives in the engines and services.
"""

from __future__ import annotations

from pathlib import Path

from docflow_config.loader import compute_checksum, load_catalog_directory
from docflow_config.registry import CatalogRegistry
from docflow_kernel.domain.catalog import WorkflowCatalog
from docflow_kernel.logging_config import get_logger
from docflow_modules import (
    bill,
    invoice,
    purchase_order,
    quotation,
    solar_proposal,
    work_order,
)

logger = get_logger("modules")

BUILTIN_CATALOGS: tuple[WorkflowCatalog, ...] = (
    quotation.QUOTATION_WORKFLOW,
    invoice.INVOICE_WORKFLOW,
    bill.BILL_WORKFLOW,
    purchase_order.PURCHASE_ORDER_WORKFLOW,
    work_order.WORK_ORDER_WORKFLOW,
    solar_proposal.SOLAR_PROPOSAL_WORKFLOW,
)

__all__ = [
    "BUILTIN_CATALOGS",
    "bill",
    "get_active_catalogs",
    "invoice",
    "purchase_order",
    "quotation",
    "solar_proposal",
    "work_order",
]


def get_active_catalogs(config_dir: Path | str | None = None) -> CatalogRegistry:
    """
    Build the catalog registry for this process.

    Starts from ``BUILTIN_CATALOGS``; every YAML catalog in ``config_dir``
    replaces the built-in of the same document type or adds a new one.

    Raises:
        CatalogValidationError: if a YAML catalog breaks an action invariant.
    """
    registry = CatalogRegistry(BUILTIN_CATALOGS)
    overrides: list[str] = []
    if config_dir is not None:
        for catalog in load_catalog_directory(Path(config_dir)):
            registry.register(catalog, replace=True)
            overrides.append(catalog.document_type)

    logger.info(
        "docflow_catalogs_loaded",
        extra={
            "document_types": list(registry.document_types),
            "overrides": overrides,
            "checksums": {c.document_type: compute_checksum(c) for c in registry},
        },
    )
    return registry
