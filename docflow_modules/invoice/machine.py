"""
Invoice state machine (``docflow_modules.invoice.machine``).

Chart-face definition of the customer invoice lifecycle::

    draft -> sent -> payment_check -> partial -> payment_check -> paid
      |       |                         |
      v       v                         v
   cancelled void <-- overdue <---------+

``RECORD_PAYMENT`` adds the event's ``amount`` to ``paid_amount`` and
lands in the transient ``payment_check`` state.  From there exactly one
of ``SETTLE_PAID`` / ``SETTLE_PARTIAL`` passes its guard;
``record_payment`` sends both steps.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any

from docflow_kernel.domain.chart import ChartTransition, MachineConfig, StateNode, TransitionResult
from docflow_kernel.domain.clock import Clock, SystemClock
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.invoice.machine")

STATUS_PAID = "paid"
STATUS_PARTIAL = "partial"

DEFAULT_CONTEXT: dict[str, Any] = {
    "id": 0,
    "contact_id": 0,
    "total_amount": Decimal("0"),
    "paid_amount": Decimal("0"),
    "due_date": None,
}


def payment_target_state(paid_amount: Decimal, total_amount: Decimal) -> str:
    """``paid`` once payments cover the total, otherwise ``partial``."""
    return STATUS_PAID if paid_amount >= total_amount else STATUS_PARTIAL


def _amount(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def _has_amount(ctx, event) -> bool:
    return _amount(ctx.get("total_amount")) > 0


def _fully_paid(ctx, event) -> bool:
    return payment_target_state(_amount(ctx.get("paid_amount")), _amount(ctx.get("total_amount"))) == STATUS_PAID


def _partially_paid(ctx, event) -> bool:
    return not _fully_paid(ctx, event)


def _log_sent(ctx, event) -> None:
    logger.info("invoice_sent", extra={"invoice_id": ctx.get("id")})


def _apply_payment(ctx, event) -> None:
    amount = _amount(event.get("amount"))
    ctx["paid_amount"] = _amount(ctx.get("paid_amount")) + amount
    logger.info(
        "invoice_payment_recorded",
        extra={"invoice_id": ctx.get("id"), "amount": amount, "total_paid": ctx["paid_amount"]},
    )


def _log_fully_paid(ctx, event) -> None:
    logger.info(
        "invoice_fully_paid",
        extra={"invoice_id": ctx.get("id"), "total": ctx.get("total_amount")},
    )


RECORD_PAYMENT = ChartTransition(target="payment_check", actions=(_apply_payment,))


def build_invoice_machine_config(clock: Clock | None = None) -> MachineConfig:
    """Invoice chart; the overdue guard reads today's date from ``clock``."""
    clock = clock or SystemClock()

    def past_due(ctx, event) -> bool:
        due_date = ctx.get("due_date")
        return due_date is not None and clock.today() > due_date

    mark_overdue = ChartTransition(
        target="overdue",
        guard=past_due,
        guard_message="Invoice is not yet overdue",
    )

    return MachineConfig(
        id="invoice",
        initial="draft",
        context=DEFAULT_CONTEXT,
        states={
            "draft": StateNode(
                label="Draft",
                description="Invoice is being prepared",
                on={
                    "SEND": ChartTransition(
                        target="sent",
                        guard=_has_amount,
                        guard_message="Cannot send invoice with zero amount",
                        actions=(_log_sent,),
                    ),
                    "CANCEL": "cancelled",
                },
            ),
            "sent": StateNode(
                label="Sent",
                description="Invoice sent to customer",
                on={
                    "RECORD_PAYMENT": RECORD_PAYMENT,
                    "MARK_OVERDUE": mark_overdue,
                    "VOID": "void",
                },
            ),
            "payment_check": StateNode(
                label="Processing",
                description="Checking payment status",
                on={
                    "SETTLE_PAID": ChartTransition(
                        target="paid",
                        guard=_fully_paid,
                        guard_message="Payments do not cover the invoice total",
                    ),
                    "SETTLE_PARTIAL": ChartTransition(
                        target="partial",
                        guard=_partially_paid,
                        guard_message="Invoice is fully paid",
                    ),
                },
            ),
            "partial": StateNode(
                label="Partial",
                description="Partially paid",
                on={
                    "RECORD_PAYMENT": RECORD_PAYMENT,
                    "MARK_OVERDUE": mark_overdue,
                    "VOID": "void",
                },
            ),
            "overdue": StateNode(
                label="Overdue",
                description="Payment is past due",
                on={
                    "RECORD_PAYMENT": RECORD_PAYMENT,
                    "VOID": "void",
                },
            ),
            "paid": StateNode(
                label="Paid",
                description="Fully paid",
                final=True,
                entry=(_log_fully_paid,),
            ),
            "void": StateNode(label="Void", description="Invoice voided", final=True),
            "cancelled": StateNode(label="Cancelled", description="Invoice cancelled", final=True),
        },
    )


INVOICE_MACHINE = build_invoice_machine_config()


def create_invoice_machine(clock: Clock | None = None, **context: Any) -> MachineConfig:
    """Invoice chart with ``context`` merged over the defaults."""
    base = build_invoice_machine_config(clock) if clock is not None else INVOICE_MACHINE
    return replace(base, context={**base.context, **context})


async def record_payment(machine, amount: Decimal) -> TransitionResult:
    """Record ``amount`` and settle into ``paid`` or ``partial``.

    Returns the first failing result, or the settlement result.
    """
    result = await machine.send({"type": "RECORD_PAYMENT", "amount": amount})
    if not result.success:
        return result
    settle = payment_target_state(
        _amount(machine.context.get("paid_amount")),
        _amount(machine.context.get("total_amount")),
    )
    return await machine.send("SETTLE_PAID" if settle == STATUS_PAID else "SETTLE_PARTIAL")
