"""
DocumentWorkflow action dispatcher.

Covers availability against the live document, the confirmation gate,
mutation dispatch and its events, the in-flight guard, failure cleanup,
and snapshot listeners.
"""

import asyncio
from types import SimpleNamespace

import pytest

from conftest import DocumentStore, RecordingMutation
from docflow_kernel.domain.document import MutationParams
from docflow_kernel.domain.events import (
    DOCUMENT_STATUS_CHANGED,
    REASON_ACTION_IN_FLIGHT,
    REASON_MUTATION_FAILED,
    TRANSITION_BLOCKED,
    TRANSITION_COMPLETED,
    TRANSITION_STARTED,
)
from docflow_modules.quotation import QUOTATION_WORKFLOW
from docflow_services.action_dispatcher import CallableMutation, DocumentWorkflow


def _names(actions) -> list[str]:
    return [a.name for a in actions]


def _workflow(store, mutations=None, sink=None) -> DocumentWorkflow:
    return DocumentWorkflow(store.document, QUOTATION_WORKFLOW, mutations, event_sink=sink)


class TestReads:
    def test_no_document(self):
        workflow = _workflow(DocumentStore(status=None))
        assert workflow.current_status == ""
        assert workflow.available_actions == ()
        assert workflow.can_execute("submit") is False
        assert workflow.is_processing is False

    def test_draft_actions(self, document_store):
        workflow = _workflow(document_store)
        assert workflow.current_status == "draft"
        assert _names(workflow.available_actions) == ["submit", "cancel", "duplicate", "print"]

    def test_submitted_actions(self):
        workflow = _workflow(DocumentStore(status="submitted"))
        names = _names(workflow.available_actions)
        assert {"approve", "reject", "cancel"} <= set(names)
        assert "submit" not in names

    def test_external_status_change_recomputes(self, document_store):
        workflow = _workflow(document_store)
        assert not workflow.can_execute("approve")
        document_store.set_status("submitted")
        names = _names(workflow.available_actions)
        assert {"approve", "reject", "cancel"} <= set(names)
        assert "submit" not in names

    def test_reads_follow_document(self, document_store):
        workflow = _workflow(document_store)
        document_store.set_status("approved")
        assert workflow.current_status == "approved"
        assert workflow.can_execute("convert")
        assert not workflow.can_execute("submit")

    def test_object_document(self):
        doc = SimpleNamespace(id=5, status="rejected")
        workflow = DocumentWorkflow(lambda: doc, QUOTATION_WORKFLOW)
        assert workflow.can_execute("revise")

    def test_get_action(self, document_store):
        workflow = _workflow(document_store)
        assert workflow.get_action("reject").requires_confirmation
        assert workflow.get_action("teleport") is None


class TestExecuteAction:
    def test_status_change_dispatches_mutation(self, document_store, event_sink):
        submit = RecordingMutation(document_store, "submitted")
        workflow = _workflow(document_store, {"submit": submit}, event_sink)

        asyncio.run(workflow.execute_action("submit"))

        assert submit.calls == [MutationParams(id=1, payload=None)]
        assert document_store.current["status"] == "submitted"
        assert workflow.processing_action is None
        assert event_sink.names() == [
            TRANSITION_STARTED,
            TRANSITION_COMPLETED,
            DOCUMENT_STATUS_CHANGED,
        ]
        assert event_sink.payloads(TRANSITION_COMPLETED)[0] == {
            "document_type": "quotation",
            "from": "draft",
            "event": "submit",
            "to": "submitted",
        }
        assert event_sink.payloads(DOCUMENT_STATUS_CHANGED)[0] == {
            "document_type": "quotation",
            "id": 1,
            "from": "draft",
            "to": "submitted",
        }

    def test_unavailable_action_is_silent(self, document_store, event_sink, captured_logs):
        approve = RecordingMutation(document_store, "approved")
        workflow = _workflow(document_store, {"approve": approve}, event_sink)

        asyncio.run(workflow.execute_action("approve"))

        assert approve.calls == []
        assert event_sink.events == []
        assert workflow.show_confirmation is False
        records = [r for r in captured_logs() if r["message"] == "workflow_action_unavailable"]
        assert records[0]["level"] == "DEBUG"
        assert records[0]["reason"] == "not_allowed_from_status"

    def test_unknown_action_is_silent(self, document_store, event_sink):
        workflow = _workflow(document_store, sink=event_sink)
        asyncio.run(workflow.execute_action("teleport"))
        assert event_sink.events == []

    def test_no_document_is_silent(self, event_sink):
        submit = RecordingMutation()
        workflow = _workflow(DocumentStore(status=None), {"submit": submit}, event_sink)
        asyncio.run(workflow.execute_action("submit"))
        assert submit.calls == []

    def test_caller_handled_action(self, document_store, event_sink):
        workflow = _workflow(document_store, sink=event_sink)
        asyncio.run(workflow.execute_action("print"))
        assert event_sink.events == []
        assert workflow.processing_action is None

    def test_side_effect_mutation_emits_no_workflow_events(self, document_store, event_sink):
        duplicate = RecordingMutation()
        workflow = _workflow(document_store, {"duplicate": duplicate}, event_sink)
        asyncio.run(workflow.execute_action("duplicate", {"copy_lines": True}))
        assert duplicate.calls == [MutationParams(id=1, payload={"copy_lines": True})]
        assert event_sink.events == []

    def test_returned_status_wins(self, document_store, event_sink):
        submit = RecordingMutation(document_store, "awaiting_manager")
        workflow = _workflow(document_store, {"submit": submit}, event_sink)
        asyncio.run(workflow.execute_action("submit"))
        assert event_sink.payloads(TRANSITION_COMPLETED)[0]["to"] == "awaiting_manager"

    def test_target_status_when_nothing_returned(self, document_store, event_sink):
        submit = RecordingMutation()
        workflow = _workflow(document_store, {"submit": submit}, event_sink)
        asyncio.run(workflow.execute_action("submit"))
        assert event_sink.payloads(TRANSITION_COMPLETED)[0]["to"] == "submitted"
        # The dispatcher never writes the status itself
        assert document_store.current["status"] == "draft"


class TestConfirmation:
    def test_reject_waits_for_confirmation(self, event_sink):
        store = DocumentStore(status="submitted")
        reject = RecordingMutation(store, "rejected")
        workflow = _workflow(store, {"reject": reject}, event_sink)

        asyncio.run(workflow.execute_action("reject", {"reason": "price"}))

        assert workflow.show_confirmation is True
        assert workflow.pending_action.name == "reject"
        assert workflow.pending_payload == {"reason": "price"}
        assert reject.calls == []
        assert event_sink.events == []

        asyncio.run(workflow.confirm_action())

        assert reject.calls == [MutationParams(id=1, payload={"reason": "price"})]
        assert store.current["status"] == "rejected"
        assert workflow.show_confirmation is False
        assert workflow.pending_action is None
        assert workflow.pending_payload is None
        assert TRANSITION_COMPLETED in event_sink.names()

    def test_cancel_clears_without_mutation(self):
        store = DocumentStore(status="submitted")
        reject = RecordingMutation(store, "rejected")
        workflow = _workflow(store, {"reject": reject})

        asyncio.run(workflow.execute_action("reject"))
        workflow.cancel_action()

        assert workflow.show_confirmation is False
        assert workflow.pending_action is None
        assert reject.calls == []
        assert store.current["status"] == "submitted"

    def test_confirm_without_pending_is_noop(self, document_store, event_sink):
        workflow = _workflow(document_store, sink=event_sink)
        asyncio.run(workflow.confirm_action())
        assert event_sink.events == []

    def test_second_request_replaces_pending(self):
        store = DocumentStore(status="submitted")
        workflow = _workflow(store)
        asyncio.run(workflow.execute_action("reject", {"reason": "first"}))
        asyncio.run(workflow.execute_action("cancel"))
        assert workflow.pending_action.name == "cancel"
        assert workflow.pending_payload is None

    def test_pending_cleared_when_mutation_fails(self):
        store = DocumentStore(status="submitted")
        reject = RecordingMutation(store, error=RuntimeError("offline"))
        workflow = _workflow(store, {"reject": reject})

        asyncio.run(workflow.execute_action("reject"))
        with pytest.raises(RuntimeError):
            asyncio.run(workflow.confirm_action())

        assert workflow.show_confirmation is False
        assert workflow.processing_action is None

    def test_confirm_after_document_removed_skips_mutation(self, event_sink, captured_logs):
        store = DocumentStore(status="submitted")
        reject = RecordingMutation(store, "rejected")
        workflow = _workflow(store, {"reject": reject}, event_sink)

        asyncio.run(workflow.execute_action("reject"))
        store.current = None
        asyncio.run(workflow.confirm_action())

        assert reject.calls == []
        assert event_sink.events == []
        assert workflow.show_confirmation is False
        assert workflow.processing_action is None

        logs = captured_logs()
        assert not any(r["message"] == "workflow_action_failed" for r in logs)
        skipped = [r for r in logs if r["message"] == "workflow_action_unavailable"]
        assert skipped[-1]["reason"] == "no_document"
        assert skipped[-1]["action"] == "reject"


class TestFailureAndConcurrency:
    def test_mutation_error_propagates_after_cleanup(self, document_store, event_sink, captured_logs):
        error = ConnectionError("api down")
        submit = RecordingMutation(document_store, error=error)
        workflow = _workflow(document_store, {"submit": submit}, event_sink)

        with pytest.raises(ConnectionError) as exc_info:
            asyncio.run(workflow.execute_action("submit"))

        assert exc_info.value is error
        assert workflow.processing_action is None
        assert document_store.current["status"] == "draft"
        assert event_sink.names() == [TRANSITION_STARTED, TRANSITION_BLOCKED]
        assert event_sink.payloads(TRANSITION_BLOCKED)[0]["reason"] == REASON_MUTATION_FAILED

        failures = [r for r in captured_logs() if r["message"] == "workflow_action_failed"]
        assert failures[0]["exc_type"] == "ConnectionError"
        assert failures[0]["document_type"] == "quotation"

    def test_second_action_refused_while_in_flight(self, document_store, event_sink):
        async def run():
            gate = asyncio.Event()
            submit = RecordingMutation(document_store, "submitted", gate=gate)
            workflow = _workflow(document_store, {"submit": submit}, event_sink)

            first = asyncio.create_task(workflow.execute_action("submit"))
            await asyncio.sleep(0)
            assert workflow.processing_action == "submit"
            assert submit.is_pending

            await workflow.execute_action("submit")
            assert len(submit.calls) == 1

            gate.set()
            await first
            return workflow, submit

        workflow, submit = asyncio.run(run())
        assert len(submit.calls) == 1
        assert workflow.processing_action is None
        blocked = event_sink.payloads(TRANSITION_BLOCKED)
        assert [b["reason"] for b in blocked] == [REASON_ACTION_IN_FLIGHT]


class TestListeners:
    def test_snapshots_on_confirmation_and_processing(self):
        store = DocumentStore(status="submitted")
        reject = RecordingMutation(store, "rejected")
        workflow = _workflow(store, {"reject": reject})
        snapshots = []
        workflow.subscribe(snapshots.append)

        asyncio.run(workflow.execute_action("reject"))
        asyncio.run(workflow.confirm_action())

        assert [s.show_confirmation for s in snapshots] == [True, True, True, False]
        assert [s.is_processing for s in snapshots] == [False, True, False, False]
        assert snapshots[-1].current_status == "rejected"
        assert "reject" not in _names(snapshots[-1].available_actions)

    def test_unsubscribe(self, document_store):
        workflow = _workflow(document_store)
        snapshots = []
        unsubscribe = workflow.subscribe(snapshots.append)
        unsubscribe()
        unsubscribe()
        asyncio.run(workflow.execute_action("cancel"))
        assert snapshots == []

    def test_refresh_notifies_only_on_status_change(self, document_store):
        workflow = _workflow(document_store)
        snapshots = []
        workflow.subscribe(snapshots.append)

        workflow.refresh()
        assert snapshots == []

        document_store.set_status("submitted")
        workflow.refresh()
        workflow.refresh()
        assert [s.current_status for s in snapshots] == ["submitted"]

    def test_snapshot(self, document_store):
        snapshot = _workflow(document_store).snapshot()
        assert snapshot.current_status == "draft"
        assert snapshot.pending_action is None
        assert snapshot.show_confirmation is False
        assert snapshot.is_processing is False


class TestCallableMutation:
    def test_tracks_pending(self):
        seen = []

        async def save(params):
            seen.append(mutation.is_pending)
            return {"id": params.id, "status": "approved"}

        mutation = CallableMutation(save)
        result = asyncio.run(mutation.mutate_async(MutationParams(id=4)))
        assert result == {"id": 4, "status": "approved"}
        assert seen == [True]
        assert mutation.is_pending is False

    def test_drives_workflow(self):
        store = DocumentStore(status="submitted")

        async def approve(params):
            store.set_status("approved")
            return store.current

        workflow = _workflow(store, {"approve": CallableMutation(approve)})
        asyncio.run(workflow.execute_action("approve"))
        assert workflow.current_status == "approved"
