"""
Workflow event vocabulary (``docflow_kernel.domain.events``).

Both faces of the engine report status-changing executions through an
injected ``EventSink`` using the names below.  Payload keys:

* ``workflow:transition-started``   -- document_type, from, event
* ``workflow:transition-completed`` -- document_type, from, to, event
* ``workflow:transition-blocked``   -- document_type, from, event, reason
* ``document:status-changed``       -- document_type, id, from, to
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

TRANSITION_STARTED = "workflow:transition-started"
TRANSITION_COMPLETED = "workflow:transition-completed"
TRANSITION_BLOCKED = "workflow:transition-blocked"
DOCUMENT_STATUS_CHANGED = "document:status-changed"

WORKFLOW_EVENTS = (
    TRANSITION_STARTED,
    TRANSITION_COMPLETED,
    TRANSITION_BLOCKED,
    DOCUMENT_STATUS_CHANGED,
)

# Blocked reasons
REASON_NO_TRANSITION = "no_transition"
REASON_GUARD_REJECTED = "guard_rejected"
REASON_ACTION_IN_FLIGHT = "action_in_flight"
REASON_MUTATION_FAILED = "mutation_failed"


@runtime_checkable
class EventSink(Protocol):
    """Receiver for workflow events (the application's event bus)."""

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        ...
