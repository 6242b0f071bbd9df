"""
docflow_services.state_machine -- Chart interpreter.

Responsibility:
    Runs a ``MachineConfig``: looks up the transition for an event,
    evaluates its guard against the machine context, commits the new
    state, then runs exit, transition, and entry actions in that order.

Architecture position:
    Services layer.  Holds the only mutable chart state (current value and
    context).  Imports kernel domain types only.

Invariants enforced:
    - State is committed before any action runs; a failing action is
      reported in ``TransitionResult.error`` and never rolls back.
    - A rejected event (no transition, guard false, guard raising) leaves
      state and context untouched.
    - Every ``send`` emits ``workflow:transition-started`` followed by
      exactly one of ``-completed`` or ``-blocked``.
    - A ``MachineState`` handed out is never changed afterwards; commits
      and ``update_context`` build a new context dict.
    - ``last_error`` and subscribers reflect every ``send``,
      ``update_context`` and ``reset``.

Failure modes:
    - ``InvalidInitialStateError`` from the constructor.
    - ``ValueError`` from ``send`` for an event mapping without ``type``.
    Everything else is reported through ``TransitionResult``.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from docflow_kernel.domain.chart import (
    ChartAction,
    ChartTransition,
    Context,
    MachineConfig,
    MachineState,
    MachineVisualization,
    StateConfig,
    TransitionResult,
    build_visualization,
    normalize_event,
)
from docflow_kernel.domain.events import (
    DOCUMENT_STATUS_CHANGED,
    REASON_GUARD_REJECTED,
    REASON_NO_TRANSITION,
    TRANSITION_BLOCKED,
    TRANSITION_COMPLETED,
    TRANSITION_STARTED,
    EventSink,
)
from docflow_kernel.exceptions import InvalidInitialStateError
from docflow_kernel.logging_config import LogContext, get_logger
from docflow_services.event_sink import NullEventSink

LOGGER_NAME = "services.state_machine"

DEFAULT_GUARD_MESSAGE = "guard rejected transition"

OUTCOME_SUCCESS = "success"
OUTCOME_ACTION_FAILED = "action_failed"

StateListener = Callable[[MachineState], None]


class StateMachine:
    """Interpreter for one chart instance.

    Each instance owns its context dict.  The ``context`` argument is
    shallow-merged over a copy of ``config.context``.
    """

    def __init__(
        self,
        config: MachineConfig,
        *,
        context: Mapping[str, Any] | None = None,
        event_sink: EventSink | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if config.initial not in config.states:
            raise InvalidInitialStateError(config.id, config.initial)
        self._config = config
        self._event_sink = event_sink or NullEventSink()
        self._logger = logger or get_logger(LOGGER_NAME)
        self._context: Context = {**config.context, **(context or {})}
        self._state = self._build_state(config.initial)
        self._transitioning = False
        self._last_error: str | None = None
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._config.id

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def value(self) -> str:
        return self._state.value

    @property
    def context(self) -> Context:
        return self._context

    @property
    def done(self) -> bool:
        return self._state.done

    @property
    def state_label(self) -> str:
        return self._state.config.label

    @property
    def last_error(self) -> str | None:
        """Error of the most recent ``send``; ``None`` after a clean transition."""
        return self._last_error

    @property
    def is_transitioning(self) -> bool:
        """True while the actions of a committed transition are running."""
        return self._transitioning

    def available_transitions(self) -> tuple[str, ...]:
        """Event types declared on the current state, guards not evaluated."""
        node = self._config.states.get(self._state.value)
        return tuple(node.on) if node is not None else ()

    def can_transition(self, event: str | Mapping[str, Any]) -> bool:
        """True iff the current state handles ``event`` and its guard passes."""
        evt = normalize_event(event)
        transition = self._find_transition(evt["type"])
        if transition is None:
            return False
        return self._guard_passes(transition, evt)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def send(self, event: str | Mapping[str, Any]) -> TransitionResult:
        """Attempt the transition for ``event`` from the current state."""
        evt = normalize_event(event)
        event_type = evt["type"]
        source = self._state.value
        t0 = time.monotonic()

        with LogContext.bind(machine_id=self.id):
            self._emit(
                TRANSITION_STARTED,
                {"document_type": self.id, "from": source, "event": event_type},
            )

            transition = self._find_transition(event_type)
            if transition is None:
                error = f"no transition for event {event_type} in state {source}"
                self._blocked(source, event_type, REASON_NO_TRANSITION, error, t0)
                self._set_last_error(error)
                return TransitionResult(success=False, state=self._state, error=error)

            if transition.guard is not None and not self._guard_passes(transition, evt):
                error = transition.guard_message or DEFAULT_GUARD_MESSAGE
                self._blocked(source, event_type, REASON_GUARD_REJECTED, error, t0)
                self._set_last_error(error)
                return TransitionResult(success=False, state=self._state, error=error)

            source_node = self._config.states[source]
            target_node = self._config.states.get(transition.target)
            # Earlier snapshots keep the context they were taken with
            self._context = dict(self._context)
            self._state = self._build_state(transition.target)

            actions = (
                source_node.exit
                + transition.actions
                + (target_node.entry if target_node is not None else ())
            )
            self._transitioning = True
            try:
                error = await self._run_actions(actions, evt)
            finally:
                self._transitioning = False

            target = self._state.value
            self._emit(
                TRANSITION_COMPLETED,
                {"document_type": self.id, "from": source, "to": target, "event": event_type},
            )
            self._emit(
                DOCUMENT_STATUS_CHANGED,
                {
                    "document_type": self.id,
                    "id": self._context.get("id"),
                    "from": source,
                    "to": target,
                },
            )
            self._logger.info(
                "machine_transition",
                extra={
                    "from_state": source,
                    "to_state": target,
                    "event": event_type,
                    "outcome": OUTCOME_ACTION_FAILED if error else OUTCOME_SUCCESS,
                    "duration_ms": round((time.monotonic() - t0) * 1000, 3),
                },
            )
            self._last_error = error
            self._notify()
            return TransitionResult(success=True, state=self._state, error=error)

    transition = send

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def update_context(self, partial: Mapping[str, Any]) -> None:
        """Merge ``partial`` over the context without transitioning.

        Builds a new context and state; snapshots handed out earlier are
        left as they were.
        """
        self._context = {**self._context, **partial}
        self._state = replace(self._state, context=self._context)
        self._notify()

    def reset(self, new_context: Mapping[str, Any] | None = None) -> None:
        """Return to the initial state with a fresh context."""
        self._context = {**self._config.context, **(new_context or {})}
        self._state = self._build_state(self._config.initial)
        self._last_error = None
        self._logger.debug("machine_reset", extra={"machine_id": self.id})
        self._notify()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with the new ``MachineState`` after every change.

        Returns a callable that unregisters it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def to_visualization(self) -> MachineVisualization:
        return build_visualization(self._config, self._state.value)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_state(self, value: str) -> MachineState:
        node = self._config.states.get(value)
        if node is None:
            # Undeclared target: implicit terminal state
            return MachineState(
                value=value,
                context=self._context,
                done=True,
                config=StateConfig(label=value),
            )
        return MachineState(value=value, context=self._context, done=node.final, config=node.config)

    def _find_transition(self, event_type: str) -> ChartTransition | None:
        node = self._config.states.get(self._state.value)
        if node is None:
            return None
        return node.transition_for(event_type)

    def _guard_passes(self, transition: ChartTransition, event: dict[str, Any]) -> bool:
        if transition.guard is None:
            return True
        try:
            return bool(transition.guard(self._context, event))
        except Exception as e:  # noqa: BLE001
            self._logger.warning(
                "guard_evaluation_error",
                extra={
                    "machine_id": self.id,
                    "state": self._state.value,
                    "event": event.get("type"),
                    "error": str(e),
                },
            )
            return False

    async def _run_actions(
        self, actions: tuple[ChartAction, ...], event: dict[str, Any]
    ) -> str | None:
        """Run ``actions`` in order; stop at and return the first failure."""
        for action in actions:
            try:
                result = action(self._context, event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._logger.error(
                    "machine_action_failed",
                    exc_info=True,
                    extra={
                        "state": self._state.value,
                        "event": event.get("type"),
                        "action": getattr(action, "__name__", repr(action)),
                    },
                )
                return str(e) or type(e).__name__
        return None

    def _blocked(self, source: str, event_type: str, reason: str, error: str, t0: float) -> None:
        self._emit(
            TRANSITION_BLOCKED,
            {
                "document_type": self.id,
                "from": source,
                "event": event_type,
                "reason": reason,
                "error": error,
            },
        )
        self._logger.info(
            "machine_transition",
            extra={
                "from_state": source,
                "event": event_type,
                "outcome": reason,
                "reason": error,
                "duration_ms": round((time.monotonic() - t0) * 1000, 3),
            },
        )

    def _set_last_error(self, error: str) -> None:
        self._last_error = error
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        self._event_sink.emit(name, payload)
