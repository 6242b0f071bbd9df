"""
Pytest fixtures for the docflow test suite.

Provides:
- Structured logging configuration and log capture
- Event sinks and deterministic clocks
- In-memory documents and mutations for dispatcher tests
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO
from typing import Any

import pytest

from docflow_kernel.domain.clock import DeterministicClock
from docflow_kernel.domain.document import MutationParams
from docflow_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from docflow_services.event_sink import CollectingEventSink


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture docflow logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "machine_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("docflow")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clocks and sinks
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock pinned to 2024-01-01 12:00 UTC."""
    return DeterministicClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def event_sink() -> CollectingEventSink:
    return CollectingEventSink()


# =============================================================================
# Documents and mutations
# =============================================================================


class DocumentStore:
    """Single in-memory document whose status the mutations update.

    ``document`` is the zero-argument callable handed to ``DocumentWorkflow``.
    """

    def __init__(self, status: str | None = "draft", id: int = 1, **fields: Any):
        self.current: dict[str, Any] | None = (
            None if status is None else {"id": id, "status": status, **fields}
        )

    def document(self) -> dict[str, Any] | None:
        return self.current

    def set_status(self, status: str) -> None:
        assert self.current is not None
        self.current = {**self.current, "status": status}


class RecordingMutation:
    """``WorkflowMutation`` that records calls and moves the store to ``target``.

    ``error`` makes every call raise; ``gate`` (an ``asyncio.Event``) makes
    calls wait until it is set.
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        target: str | None = None,
        *,
        error: Exception | None = None,
        gate=None,
    ):
        self.store = store
        self.target = target
        self.error = error
        self.gate = gate
        self.calls: list[MutationParams] = []
        self.is_pending = False

    async def mutate_async(self, params: MutationParams) -> Any:
        self.calls.append(params)
        self.is_pending = True
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.error is not None:
                raise self.error
            if self.store is not None and self.target is not None:
                self.store.set_status(self.target)
            return self.store.current if self.store is not None else None
        finally:
            self.is_pending = False


@pytest.fixture
def document_store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture
def make_mutation():
    """Factory for ``RecordingMutation`` instances."""
    return RecordingMutation
