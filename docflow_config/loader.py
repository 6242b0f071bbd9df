"""
Catalog loader (``docflow_config.loader``).

Responsibility
--------------
Loads workflow catalogs from YAML files and parses them into the frozen
``docflow_kernel.domain.catalog`` types.  Every loaded catalog is
validated before it is returned, so a malformed file fails at load time
rather than at the first button click.

YAML shape::

    document_type: delivery_order
    description: Outbound delivery lifecycle
    initial_status: draft
    actions:
      - name: ship
        label: Mark as Shipped
        variant: primary
        icon: Truck
        allowed_from_statuses: [draft]
        target_status: shipped
      - name: cancel
        label: Cancel Delivery
        variant: destructive
        requires_confirmation: true
        confirmation_message: Cancel this delivery order?
        allowed_from_statuses: [draft, shipped]
        target_status: cancelled

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown variant  -> ``ValueError``.
* ``allowed_from_statuses`` not a list of strings  -> ``ValueError``.
* Invariant violations  -> ``CatalogValidationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from docflow_config.validator import validate_catalog_or_raise
from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("config.loader")

CATALOG_SUFFIXES = (".yaml", ".yml")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_variant(value: Any) -> ActionVariant:
    """Parse an ``ActionVariant``; ``None`` means secondary."""
    if value is None:
        return ActionVariant.SECONDARY
    try:
        return ActionVariant(str(value).lower())
    except ValueError:
        raise ValueError(
            f"Unknown action variant {value!r}; expected one of "
            f"{[v.value for v in ActionVariant]}"
        ) from None


def parse_statuses(value: Any, action_name: str) -> frozenset[str]:
    """Parse ``allowed_from_statuses``: a YAML list of status strings."""
    if not isinstance(value, (list, tuple)) or not all(isinstance(s, str) for s in value):
        raise ValueError(
            f"Action {action_name!r}: allowed_from_statuses must be a list of "
            f"status names, got {value!r}"
        )
    return frozenset(value)


def parse_action(data: dict[str, Any]) -> WorkflowAction:
    """
    Parse a ``WorkflowAction`` from a dict.

    Raises:
        KeyError: if ``name``, ``label`` or ``allowed_from_statuses`` is missing.
        ValueError: if the variant is unknown or the statuses are not a list.
    """
    return WorkflowAction(
        name=data["name"],
        label=data["label"],
        allowed_from_statuses=parse_statuses(data["allowed_from_statuses"], data["name"]),
        variant=parse_variant(data.get("variant")),
        target_status=data.get("target_status"),
        requires_confirmation=bool(data.get("requires_confirmation", False)),
        confirmation_message=data.get("confirmation_message"),
        icon=data.get("icon"),
    )


def parse_catalog(data: dict[str, Any]) -> WorkflowCatalog:
    """Parse a ``WorkflowCatalog`` from a dict (not validated)."""
    return WorkflowCatalog(
        document_type=data["document_type"],
        description=data.get("description", ""),
        initial_status=data.get("initial_status"),
        actions=tuple(parse_action(a) for a in data.get("actions", [])),
    )


def load_catalog_file(path: Path) -> WorkflowCatalog:
    """Load, parse and validate one catalog file."""
    catalog = parse_catalog(load_yaml_file(path))
    result = validate_catalog_or_raise(catalog)
    for warning in result.warnings:
        logger.warning(
            "catalog_validation_warning",
            extra={
                "document_type": catalog.document_type,
                "path": str(path),
                "warning": warning,
            },
        )
    logger.info(
        "catalog_loaded",
        extra={
            "document_type": catalog.document_type,
            "path": str(path),
            "action_count": len(catalog.actions),
            "checksum": compute_checksum(catalog),
        },
    )
    return catalog


def load_catalog_directory(directory: Path) -> list[WorkflowCatalog]:
    """Load every ``*.yaml``/``*.yml`` catalog in ``directory``, sorted by name."""
    paths = sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix in CATALOG_SUFFIXES
    )
    return [load_catalog_file(p) for p in paths]


def catalog_to_dict(catalog: WorkflowCatalog) -> dict[str, Any]:
    """Canonical dict form of a catalog, the inverse of ``parse_catalog``."""
    return {
        "document_type": catalog.document_type,
        "description": catalog.description,
        "initial_status": catalog.initial_status,
        "actions": [
            {
                "name": a.name,
                "label": a.label,
                "variant": a.variant.value,
                "icon": a.icon,
                "allowed_from_statuses": sorted(a.allowed_from_statuses),
                "target_status": a.target_status,
                "requires_confirmation": a.requires_confirmation,
                "confirmation_message": a.confirmation_message,
            }
            for a in catalog.actions
        ],
    }


def compute_checksum(catalog: WorkflowCatalog) -> str:
    """Deterministic SHA-256 of the catalog's canonical JSON form."""
    canonical = json.dumps(catalog_to_dict(catalog), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
