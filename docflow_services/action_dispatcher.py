"""
docflow_services.action_dispatcher -- Per-document action dispatch.

Responsibility:
    Binds one document to its ``WorkflowCatalog`` and a set of per-action
    mutations.  Answers "which actions are legal now", runs the
    confirmation gate for destructive actions, serializes mutations
    through ``processing_action``, and reports status changes as
    workflow events.

Architecture position:
    Services layer.  Thin coordinator -- availability is delegated to
    ``docflow_engines.availability``; persistence to the injected
    ``WorkflowMutation`` objects.

Invariants enforced:
    - At most one pending confirmation and one in-flight mutation per
      instance.
    - ``processing_action`` is cleared before any mutation exception
      reaches the caller.
    - The dispatcher never writes the document's status.  The document
      callable is re-read on every access.

Failure modes:
    - Unavailable actions are silent no-ops (debug log only).
    - A mutation's own exception propagates unchanged after cleanup.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from docflow_engines.availability import available_actions, blocking_reason, can_execute
from docflow_kernel.domain.catalog import WorkflowAction, WorkflowCatalog
from docflow_kernel.domain.document import (
    MutationParams,
    WorkflowMutation,
    document_status,
    get_field,
)
from docflow_kernel.domain.events import (
    DOCUMENT_STATUS_CHANGED,
    REASON_ACTION_IN_FLIGHT,
    REASON_MUTATION_FAILED,
    TRANSITION_BLOCKED,
    TRANSITION_COMPLETED,
    TRANSITION_STARTED,
    EventSink,
)
from docflow_kernel.logging_config import LogContext, get_logger
from docflow_services.event_sink import NullEventSink

LOGGER_NAME = "services.action_dispatcher"

REASON_NO_DOCUMENT = "no_document"


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Point-in-time view of a ``DocumentWorkflow`` for listeners."""

    current_status: str
    available_actions: tuple[WorkflowAction, ...]
    pending_action: WorkflowAction | None = None
    pending_payload: Any = None
    processing_action: str | None = None

    @property
    def show_confirmation(self) -> bool:
        return self.pending_action is not None

    @property
    def is_processing(self) -> bool:
        return self.processing_action is not None


SnapshotListener = Callable[[WorkflowSnapshot], None]


class CallableMutation:
    """Adapts ``async fn(params) -> document`` to ``WorkflowMutation``."""

    def __init__(self, fn: Callable[[MutationParams], Awaitable[Any]]) -> None:
        self._fn = fn
        self.is_pending = False

    async def mutate_async(self, params: MutationParams) -> Any:
        self.is_pending = True
        try:
            return await self._fn(params)
        finally:
            self.is_pending = False


class DocumentWorkflow:
    """
    Action dispatcher for one document.

    ``document`` is a zero-argument callable returning the current
    document (object or mapping with ``id`` and ``status``) or ``None``.
    ``mutations`` maps action name to the persistence call for that
    action; actions without a mutation are handled by the caller.
    """

    def __init__(
        self,
        document: Callable[[], Any],
        catalog: WorkflowCatalog,
        mutations: Mapping[str, WorkflowMutation] | None = None,
        *,
        event_sink: EventSink | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._document = document
        self._catalog = catalog
        self._mutations: dict[str, WorkflowMutation] = dict(mutations or {})
        self._event_sink = event_sink or NullEventSink()
        self._logger = logger or get_logger(LOGGER_NAME)

        self._pending_action: WorkflowAction | None = None
        self._pending_payload: Any = None
        self._processing_action: str | None = None
        self._listeners: list[SnapshotListener] = []
        self._last_status = self.current_status

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> WorkflowCatalog:
        return self._catalog

    @property
    def document(self) -> Any:
        return self._document()

    @property
    def current_status(self) -> str:
        return document_status(self._document())

    @property
    def available_actions(self) -> tuple[WorkflowAction, ...]:
        if self._document() is None:
            return ()
        return available_actions(self._catalog, self.current_status)

    def can_execute(self, name: str) -> bool:
        if self._document() is None:
            return False
        return can_execute(self._catalog, self.current_status, name)

    def get_action(self, name: str) -> WorkflowAction | None:
        return self._catalog.get_action(name)

    @property
    def show_confirmation(self) -> bool:
        return self._pending_action is not None

    @property
    def pending_action(self) -> WorkflowAction | None:
        return self._pending_action

    @property
    def pending_payload(self) -> Any:
        return self._pending_payload

    @property
    def processing_action(self) -> str | None:
        return self._processing_action

    @property
    def is_processing(self) -> bool:
        return self._processing_action is not None

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            current_status=self.current_status,
            available_actions=self.available_actions,
            pending_action=self._pending_action,
            pending_payload=self._pending_payload,
            processing_action=self._processing_action,
        )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> None:
        """Notify listeners if the document's status changed since last notice."""
        if self.current_status != self._last_status:
            self._notify()

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    async def execute_action(self, name: str, payload: Any = None) -> None:
        """
        Run ``name`` against the current document.

        Unavailable actions return silently.  Actions that require
        confirmation are parked as the pending action until
        ``confirm_action`` or ``cancel_action``; a later request
        replaces an earlier pending one.
        """
        if not self.can_execute(name):
            status = self.current_status
            self._logger.debug(
                "workflow_action_unavailable",
                extra={
                    "document_type": self._catalog.document_type,
                    "action": name,
                    "status": status,
                    "reason": (
                        REASON_NO_DOCUMENT
                        if self._document() is None
                        else blocking_reason(self._catalog, status, name)
                    ),
                },
            )
            return

        action = self._catalog.get_action(name)
        if action.requires_confirmation:
            self._pending_action = action
            self._pending_payload = payload
            self._logger.info(
                "workflow_confirmation_requested",
                extra={"document_type": self._catalog.document_type, "action": name},
            )
            self._notify()
            return

        await self._perform(action, payload)

    async def confirm_action(self) -> None:
        """Run the pending action, then close the confirmation gate."""
        action = self._pending_action
        if action is None:
            return
        payload = self._pending_payload
        try:
            await self._perform(action, payload)
        finally:
            if self._pending_action is action:
                self._pending_action = None
                self._pending_payload = None
                self._notify()

    def cancel_action(self) -> None:
        """Close the confirmation gate without running anything."""
        if self._pending_action is None:
            return
        self._logger.info(
            "workflow_confirmation_cancelled",
            extra={
                "document_type": self._catalog.document_type,
                "action": self._pending_action.name,
            },
        )
        self._pending_action = None
        self._pending_payload = None
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _perform(self, action: WorkflowAction, payload: Any) -> None:
        document = self._document()
        if document is None:
            self._logger.debug(
                "workflow_action_unavailable",
                extra={
                    "document_type": self._catalog.document_type,
                    "action": action.name,
                    "reason": REASON_NO_DOCUMENT,
                },
            )
            return
        document_id = get_field(document, "id")
        source = document_status(document)
        base = {
            "document_type": self._catalog.document_type,
            "from": source,
            "event": action.name,
        }

        if self._processing_action is not None:
            self._logger.debug(
                "workflow_action_in_flight",
                extra={"action": action.name, "processing_action": self._processing_action},
            )
            if action.changes_status:
                self._emit(TRANSITION_BLOCKED, {**base, "reason": REASON_ACTION_IN_FLIGHT})
            return

        mutation = self._mutations.get(action.name)
        if mutation is None:
            self._logger.debug(
                "workflow_action_caller_handled",
                extra={"document_type": self._catalog.document_type, "action": action.name},
            )
            return

        self._processing_action = action.name
        self._notify()
        t0 = time.monotonic()

        with LogContext.bind(
            document_type=self._catalog.document_type,
            document_id=document_id,
        ):
            if action.changes_status:
                self._emit(TRANSITION_STARTED, base)
            try:
                updated = await mutation.mutate_async(
                    MutationParams(id=document_id, payload=payload)
                )
            except Exception as e:
                if action.changes_status:
                    self._emit(
                        TRANSITION_BLOCKED,
                        {**base, "reason": REASON_MUTATION_FAILED, "error": str(e)},
                    )
                self._logger.error(
                    "workflow_action_failed",
                    exc_info=True,
                    extra={
                        "action": action.name,
                        "from_state": source,
                        "duration_ms": round((time.monotonic() - t0) * 1000, 3),
                    },
                )
                raise
            else:
                target = document_status(updated) or action.target_status
                if action.changes_status:
                    self._emit(TRANSITION_COMPLETED, {**base, "to": target})
                    self._emit(
                        DOCUMENT_STATUS_CHANGED,
                        {
                            "document_type": self._catalog.document_type,
                            "id": document_id,
                            "from": source,
                            "to": target,
                        },
                    )
                self._logger.info(
                    "workflow_action_completed",
                    extra={
                        "action": action.name,
                        "from_state": source,
                        "to_state": target if action.changes_status else source,
                        "duration_ms": round((time.monotonic() - t0) * 1000, 3),
                    },
                )
            finally:
                self._processing_action = None
                self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        self._last_status = snapshot.current_status
        for listener in list(self._listeners):
            listener(snapshot)

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        self._event_sink.emit(name, payload)
