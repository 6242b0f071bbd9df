"""
Catalog registry.

One ``WorkflowCatalog`` per document type.  The registry is filled once at
start-up and then only read; every open page for a document type shares
the same catalog instance.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from docflow_kernel.domain.catalog import WorkflowCatalog
from docflow_kernel.exceptions import DuplicateDocumentTypeError, UnknownDocumentTypeError


class CatalogRegistry:
    """Document type -> ``WorkflowCatalog`` lookup."""

    def __init__(self, catalogs: Iterable[WorkflowCatalog] = ()) -> None:
        self._catalogs: dict[str, WorkflowCatalog] = {}
        for catalog in catalogs:
            self.register(catalog)

    def register(self, catalog: WorkflowCatalog, *, replace: bool = False) -> None:
        """Register ``catalog``.

        Raises:
            DuplicateDocumentTypeError: if the type is taken and ``replace`` is False.
        """
        if catalog.document_type in self._catalogs and not replace:
            raise DuplicateDocumentTypeError(catalog.document_type)
        self._catalogs[catalog.document_type] = catalog

    def get(self, document_type: str) -> WorkflowCatalog:
        """Return the catalog for ``document_type``.

        Raises:
            UnknownDocumentTypeError: if none is registered.
        """
        try:
            return self._catalogs[document_type]
        except KeyError:
            raise UnknownDocumentTypeError(document_type) from None

    def find(self, document_type: str) -> WorkflowCatalog | None:
        return self._catalogs.get(document_type)

    @property
    def document_types(self) -> tuple[str, ...]:
        return tuple(self._catalogs)

    def __contains__(self, document_type: object) -> bool:
        return document_type in self._catalogs

    def __iter__(self) -> Iterator[WorkflowCatalog]:
        return iter(self._catalogs.values())

    def __len__(self) -> int:
        return len(self._catalogs)
