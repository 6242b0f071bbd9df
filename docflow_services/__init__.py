"""
docflow_services -- Package init and public API.

Responsibility:
    Stateful runtime objects over the pure kernel and engines: the
    per-document action dispatcher, the chart interpreter, and event
    sinks.  This is the only layer that holds mutable workflow state.

Architecture position:
    Services -- stateful orchestration over engines + kernel.

    Dependency direction (enforced by tests/architecture/test_layer_boundary.py):
        docflow_services/ -> docflow_engines/  (allowed)
        docflow_services/ -> docflow_kernel/   (allowed)
        docflow_engines/  -> docflow_services/ (FORBIDDEN)
        docflow_kernel/   -> docflow_services/ (FORBIDDEN)

Failure modes:
    - Mutation exceptions propagate from ``DocumentWorkflow`` unchanged.
    - Chart rejections are returned as ``TransitionResult``, never raised.
"""

from docflow_services.action_dispatcher import (
    CallableMutation,
    DocumentWorkflow,
    WorkflowSnapshot,
)
from docflow_services.event_sink import (
    CollectingEventSink,
    LoggingEventSink,
    NullEventSink,
)
from docflow_services.state_machine import StateMachine

__all__ = [
    "CallableMutation",
    "CollectingEventSink",
    "DocumentWorkflow",
    "LoggingEventSink",
    "NullEventSink",
    "StateMachine",
    "WorkflowSnapshot",
]
