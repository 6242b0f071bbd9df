"""
Built-in chart configurations: quotation, invoice, purchase order.

Exercises the guards over document data (amounts, vendors, validity and
due dates) through the StateMachine interpreter.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from docflow_modules.invoice import (
    INVOICE_MACHINE,
    create_invoice_machine,
    payment_target_state,
    record_payment,
)
from docflow_modules.purchase_order import PURCHASE_ORDER_MACHINE, create_purchase_order_machine
from docflow_modules.quotation import QUOTATION_MACHINE, create_quotation_machine
from docflow_services.state_machine import StateMachine

ALL_MACHINES = [QUOTATION_MACHINE, INVOICE_MACHINE, PURCHASE_ORDER_MACHINE]


def _send(machine, *events):
    async def run():
        results = []
        for event in events:
            results.append(await machine.send(event))
        return results

    return asyncio.run(run())


class TestMachineShapes:
    @pytest.mark.parametrize("config", ALL_MACHINES, ids=lambda c: c.id)
    def test_initial_state_declared(self, config):
        assert config.initial in config.states

    @pytest.mark.parametrize("config", ALL_MACHINES, ids=lambda c: c.id)
    def test_targets_declared(self, config):
        for name, node in config.states.items():
            for event in node.on:
                assert node.transition_for(event).target in config.states, f"{name}.{event}"

    @pytest.mark.parametrize("config", ALL_MACHINES, ids=lambda c: c.id)
    def test_final_states_have_no_transitions(self, config):
        for name, node in config.states.items():
            if node.final:
                assert not node.on, name

    def test_factory_merges_context(self):
        config = create_quotation_machine(id=42, total_amount=Decimal("10"))
        assert config.context["id"] == 42
        assert config.context["total_amount"] == Decimal("10")
        assert config.context["valid_until"] is None
        assert QUOTATION_MACHINE.context["id"] == 0


class TestQuotationMachine:
    def test_zero_amount_blocks_submit(self):
        machine = StateMachine(QUOTATION_MACHINE)
        (result,) = _send(machine, "SUBMIT")
        assert result.success is False
        assert result.error == "Cannot submit quotation with zero amount"
        assert machine.value == "draft"

    def test_submit_runs_transition_then_entry_actions(self, captured_logs):
        machine = StateMachine(create_quotation_machine(id=7, total_amount=Decimal("250")))
        (result,) = _send(machine, "SUBMIT")
        assert result.success
        assert result.error is None
        assert machine.value == "submitted"

        messages = [r["message"] for r in captured_logs()]
        assert messages.index("quotation_submitted") < messages.index(
            "quotation_entered_submitted"
        )

    def test_reject_and_revise(self):
        machine = StateMachine(create_quotation_machine(total_amount=Decimal("1")))
        _send(machine, "SUBMIT", {"type": "REJECT", "reason": "too expensive"})
        assert machine.value == "rejected"
        assert machine.context["rejection_reason"] == "too expensive"

        _send(machine, "REVISE")
        assert machine.value == "draft"
        assert machine.context["rejection_reason"] is None

    def test_convert_while_valid(self, deterministic_clock):
        config = create_quotation_machine(
            deterministic_clock,
            total_amount=Decimal("500"),
            valid_until=date(2024, 1, 31),
        )
        machine = StateMachine(config)
        results = _send(machine, "SUBMIT", "APPROVE", {"type": "CONVERT", "invoice_id": 99})
        assert all(r.success for r in results)
        assert machine.value == "converted"
        assert machine.done
        assert machine.context["converted_invoice_id"] == 99

    def test_expired_quotation_cannot_convert(self, deterministic_clock):
        config = create_quotation_machine(
            deterministic_clock,
            total_amount=Decimal("500"),
            valid_until=date(2024, 1, 31),
        )
        machine = StateMachine(config)
        _send(machine, "SUBMIT", "APPROVE")

        assert not machine.can_transition("EXPIRE")
        deterministic_clock.advance_days(45)

        (convert,) = _send(machine, "CONVERT")
        assert convert.success is False
        assert convert.error == "Cannot convert expired quotation"

        (expire,) = _send(machine, "EXPIRE")
        assert expire.success
        assert machine.value == "expired"
        assert machine.done


class TestPaymentTargetState:
    @pytest.mark.parametrize(
        "paid,total,expected",
        [
            ("100", "100", "paid"),
            ("150", "100", "paid"),
            ("99.99", "100", "partial"),
            ("0", "100", "partial"),
        ],
    )
    def test_target(self, paid, total, expected):
        assert payment_target_state(Decimal(paid), Decimal(total)) == expected


class TestInvoiceMachine:
    def test_zero_amount_blocks_send(self):
        machine = StateMachine(INVOICE_MACHINE)
        (result,) = _send(machine, "SEND")
        assert result.success is False
        assert result.error == "Cannot send invoice with zero amount"

    def test_partial_then_full_payment(self, deterministic_clock, captured_logs):
        machine = StateMachine(
            create_invoice_machine(
                deterministic_clock,
                id=3,
                total_amount=Decimal("100.00"),
                due_date=date(2024, 1, 15),
            )
        )
        _send(machine, "SEND")

        result = asyncio.run(record_payment(machine, Decimal("40.00")))
        assert result.success
        assert machine.value == "partial"
        assert machine.context["paid_amount"] == Decimal("40.00")

        (early,) = _send(machine, "MARK_OVERDUE")
        assert early.success is False
        assert early.error == "Invoice is not yet overdue"

        deterministic_clock.advance_days(30)
        (overdue,) = _send(machine, "MARK_OVERDUE")
        assert overdue.success
        assert machine.value == "overdue"

        result = asyncio.run(record_payment(machine, Decimal("60.00")))
        assert result.success
        assert machine.value == "paid"
        assert machine.done
        assert any(r["message"] == "invoice_fully_paid" for r in captured_logs())

    def test_settle_guards_are_exclusive(self):
        machine = StateMachine(create_invoice_machine(total_amount=Decimal("10")))
        _send(machine, "SEND", {"type": "RECORD_PAYMENT", "amount": Decimal("10")})
        assert machine.value == "payment_check"
        assert machine.can_transition("SETTLE_PAID")
        assert not machine.can_transition("SETTLE_PARTIAL")

    def test_record_payment_rejected_in_draft(self):
        machine = StateMachine(create_invoice_machine(total_amount=Decimal("10")))
        result = asyncio.run(record_payment(machine, Decimal("5")))
        assert result.success is False
        assert machine.value == "draft"
        assert machine.context["paid_amount"] == Decimal("0")

    def test_void_from_sent(self):
        machine = StateMachine(create_invoice_machine(total_amount=Decimal("10")))
        _send(machine, "SEND", "VOID")
        assert machine.value == "void"
        assert machine.done


class TestPurchaseOrderMachine:
    def test_submit_requires_vendor(self):
        machine = StateMachine(create_purchase_order_machine(total_amount=Decimal("1000")))
        (result,) = _send(machine, "SUBMIT")
        assert result.success is False
        assert result.error == "PO must have a vendor and amount"

    def test_rejection_cycle(self):
        machine = StateMachine(
            create_purchase_order_machine(vendor_id=5, total_amount=Decimal("1000"))
        )
        _send(machine, "SUBMIT", {"type": "REJECT", "reason": "wrong vendor"})
        assert machine.value == "rejected"
        assert machine.context["rejection_reason"] == "wrong vendor"

        _send(machine, "SUBMIT")
        assert machine.value == "submitted"
        assert machine.context["rejection_reason"] is None

    def test_receiving(self):
        machine = StateMachine(
            create_purchase_order_machine(vendor_id=5, total_amount=Decimal("1000"))
        )
        _send(
            machine,
            "SUBMIT",
            "APPROVE",
            "SEND_TO_VENDOR",
            {"type": "RECEIVE_PARTIAL", "amount": Decimal("400")},
        )
        assert machine.value == "partial_received"
        assert machine.context["received_amount"] == Decimal("400")

        (last,) = _send(machine, {"type": "RECEIVE_PARTIAL", "amount": Decimal("600")})
        assert last.success is False
        assert machine.context["received_amount"] == Decimal("400")

        _send(machine, "RECEIVE_FULL")
        assert machine.value == "received"
        assert machine.done
        assert machine.context["received_amount"] == Decimal("1000")
