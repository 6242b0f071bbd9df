"""
Chart state machine types (``docflow_kernel.domain.chart``).

Responsibility
--------------
Pure value objects for the chart face of the workflow engine: state
nodes with event-keyed transitions, optional guards over the machine
context, and entry/exit/transition action lists.  The ``StateMachine``
service in ``docflow_services.state_machine`` executes these.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Callable contracts
------------------
* Guard:  ``(context, event) -> bool``.  Synchronous.
* Action: ``(context, event) -> None | Awaitable[None]``.  Entry, exit,
  and transition actions share this signature.  Actions may mutate the
  context dict in place.

``context`` is a caller-defined ``dict``; ``event`` is always the
normalized event dict (see ``normalize_event``).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

Context = dict[str, Any]
ChartEvent = Mapping[str, Any]
Guard = Callable[[Context, ChartEvent], bool]
ChartAction = Callable[[Context, ChartEvent], Awaitable[None] | None]


def normalize_event(event: str | Mapping[str, Any]) -> dict[str, Any]:
    """Turn a bare event name or an event mapping into a dict with ``type``.

    Raises:
        ValueError: if a mapping event has no ``type``.
    """
    if isinstance(event, str):
        return {"type": event}
    if "type" not in event:
        raise ValueError(f"Event mapping has no 'type': {dict(event)!r}")
    return dict(event)


@dataclass(frozen=True)
class ChartTransition:
    """A transition to ``target``, optionally gated by ``guard``.

    ``guard_message`` replaces the generic rejection text when the guard
    blocks the transition.
    """

    target: str
    guard: Guard | None = None
    guard_message: str | None = None
    actions: tuple[ChartAction, ...] = ()


@dataclass(frozen=True)
class StateConfig:
    """Presentational part of a state, exposed on ``MachineState.config``."""

    label: str
    description: str | None = None


@dataclass(frozen=True)
class StateNode:
    """A declared state: label, outgoing transitions, entry/exit actions.

    ``on`` maps event type to a ``ChartTransition`` or, as shorthand, a
    bare target state name.
    """

    label: str
    description: str | None = None
    on: Mapping[str, ChartTransition | str] = field(default_factory=dict)
    entry: tuple[ChartAction, ...] = ()
    exit: tuple[ChartAction, ...] = ()
    final: bool = False

    @property
    def config(self) -> StateConfig:
        return StateConfig(label=self.label, description=self.description)

    def transition_for(self, event_type: str) -> ChartTransition | None:
        """Return the transition for ``event_type``, expanding shorthand."""
        entry = self.on.get(event_type)
        if entry is None:
            return None
        if isinstance(entry, str):
            return ChartTransition(target=entry)
        return entry


@dataclass(frozen=True)
class MachineConfig:
    """Complete chart definition.

    Contract: ``initial`` must name a key of ``states`` (checked by the
    ``StateMachine`` constructor).  Transition targets that are not
    declared are implicit terminal states.
    """

    id: str
    initial: str
    states: Mapping[str, StateNode]
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MachineState:
    """Snapshot of a machine: current value, context, done flag, config."""

    value: str
    context: Context
    done: bool
    config: StateConfig


@dataclass(frozen=True)
class TransitionResult:
    """Result of a chart transition attempt.

    ``success=False`` means the state did not change.  ``success=True``
    with ``error`` set means the state committed but a side-effect action
    failed afterwards.
    """

    success: bool
    state: MachineState
    error: str | None = None


# ---------------------------------------------------------------------------
# Visualization shape
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VisualState:
    name: str
    label: str
    final: bool


@dataclass(frozen=True)
class VisualTransition:
    source: str
    target: str
    event: str


@dataclass(frozen=True)
class MachineVisualization:
    """Public shape of a chart consumed by the visualization exporter."""

    id: str
    states: tuple[VisualState, ...]
    transitions: tuple[VisualTransition, ...]
    current_state: str
    initial: str | None = None


def build_visualization(config: MachineConfig, current_state: str) -> MachineVisualization:
    """Flatten a ``MachineConfig`` into its visualization shape.

    Implicit terminal targets are appended as final states so that every
    edge has both endpoints.
    """
    states = [
        VisualState(name=name, label=node.label, final=node.final)
        for name, node in config.states.items()
    ]
    transitions: list[VisualTransition] = []
    for name, node in config.states.items():
        for event_type in node.on:
            transition = node.transition_for(event_type)
            transitions.append(
                VisualTransition(source=name, target=transition.target, event=event_type)
            )

    declared = set(config.states)
    for t in transitions:
        if t.target not in declared:
            declared.add(t.target)
            states.append(VisualState(name=t.target, label=t.target, final=True))

    return MachineVisualization(
        id=config.id,
        states=tuple(states),
        transitions=tuple(transitions),
        current_state=current_state,
        initial=config.initial,
    )
