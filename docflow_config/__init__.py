"""
docflow_config -- workflow catalog configuration.

Responsibility:
    YAML loading, invariant validation, checksums, and the catalog
    registry.  Built-in catalogs are declared in ``docflow_modules`` and
    merged with YAML overrides by ``docflow_modules.get_active_catalogs``.

Architecture position:
    Configuration -- sits above ``docflow_kernel`` and below
    ``docflow_modules``.  The kernel and engines MUST NEVER import from
    this package.

Failure modes:
    - ``FileNotFoundError`` / ``yaml.YAMLError`` -- unreadable YAML.
    - ``KeyError`` / ``ValueError`` -- structurally malformed catalog.
    - ``CatalogValidationError`` -- action invariant violations.
"""

from docflow_config.loader import (
    compute_checksum,
    load_catalog_directory,
    load_catalog_file,
    parse_action,
    parse_catalog,
)
from docflow_config.registry import CatalogRegistry
from docflow_config.validator import (
    CatalogValidationResult,
    validate_catalog,
    validate_catalog_or_raise,
)

__all__ = [
    "CatalogRegistry",
    "CatalogValidationResult",
    "compute_checksum",
    "load_catalog_directory",
    "load_catalog_file",
    "parse_action",
    "parse_catalog",
    "validate_catalog",
    "validate_catalog_or_raise",
]
