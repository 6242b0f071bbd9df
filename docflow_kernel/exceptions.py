"""
Typed exception hierarchy for docflow.

Every error carries a machine-readable ``code`` class attribute and the
structured data needed to act on it, so callers catch by type and never
parse messages.

    DocflowError (base)
    |
    +-- MachineConfigError
    |   +-- InvalidInitialStateError
    |
    +-- CatalogError
        +-- CatalogValidationError
        +-- UnknownDocumentTypeError
        +-- DuplicateDocumentTypeError

Code reference
--------------

Category   | Code                       | When raised
-----------|----------------------------|-------------------------------------
Machine    | INVALID_INITIAL_STATE      | Chart initial state not declared
Catalog    | CATALOG_VALIDATION_FAILED  | YAML catalog breaks an action invariant
           | UNKNOWN_DOCUMENT_TYPE      | Registry lookup for unregistered type
           | DUPLICATE_DOCUMENT_TYPE    | Registering a type twice without replace

The runtime protocol never raises these.  A rejected action is a silent
no-op, a failed chart transition is a ``TransitionResult`` with
``success=False``, and a failed mutation propagates the caller's own
exception unchanged.
"""


class DocflowError(Exception):
    """
    Base exception for all docflow errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "DOCFLOW_ERROR"


# Chart configuration


class MachineConfigError(DocflowError):
    """Base exception for state machine configuration errors."""

    code: str = "MACHINE_CONFIG_ERROR"


class InvalidInitialStateError(MachineConfigError):
    """The configured initial state is not one of the declared states."""

    code: str = "INVALID_INITIAL_STATE"

    def __init__(self, machine_id: str, initial: str):
        self.machine_id = machine_id
        self.initial = initial
        super().__init__(f"Invalid initial state for machine {machine_id}: {initial}")


# Action catalogs


class CatalogError(DocflowError):
    """Base exception for workflow catalog errors."""

    code: str = "CATALOG_ERROR"


class CatalogValidationError(CatalogError):
    """A catalog violates one or more action invariants."""

    code: str = "CATALOG_VALIDATION_FAILED"

    def __init__(self, document_type: str, violations: list[str]):
        self.document_type = document_type
        self.violations = list(violations)
        super().__init__(
            f"Catalog {document_type!r} failed validation: "
            + "; ".join(self.violations)
        )


class UnknownDocumentTypeError(CatalogError):
    """No catalog is registered for the requested document type."""

    code: str = "UNKNOWN_DOCUMENT_TYPE"

    def __init__(self, document_type: str):
        self.document_type = document_type
        super().__init__(f"No workflow catalog for document type: {document_type}")


class DuplicateDocumentTypeError(CatalogError):
    """A catalog for this document type is already registered."""

    code: str = "DUPLICATE_DOCUMENT_TYPE"

    def __init__(self, document_type: str):
        self.document_type = document_type
        super().__init__(f"Workflow catalog already registered: {document_type}")
