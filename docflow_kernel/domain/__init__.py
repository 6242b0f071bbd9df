"""Pure domain value objects. ZERO I/O."""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.domain.chart import (
    ChartTransition,
    MachineConfig,
    MachineState,
    MachineVisualization,
    StateConfig,
    StateNode,
    TransitionResult,
    VisualState,
    VisualTransition,
    normalize_event,
)
from docflow_kernel.domain.events import EventSink

__all__ = [
    "ActionVariant",
    "ChartTransition",
    "EventSink",
    "MachineConfig",
    "MachineState",
    "MachineVisualization",
    "StateConfig",
    "StateNode",
    "TransitionResult",
    "VisualState",
    "VisualTransition",
    "WorkflowAction",
    "WorkflowCatalog",
    "normalize_event",
]
