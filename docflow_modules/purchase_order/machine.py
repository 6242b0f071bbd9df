"""
Purchase order state machine (``docflow_modules.purchase_order.machine``).

Chart-face definition of the purchase order lifecycle::

    draft -> submitted -> approved -> ordered -> partial_received -> received
      |         |            |          |   \\------------------------^
      v         v            v          v
   cancelled  rejected   cancelled  cancelled

Guards
------
* SUBMIT (from draft) -- a vendor and a positive amount are required.
* RECEIVE_PARTIAL (from partial_received) -- the new receipt must still
  leave the order short; the last receipt uses RECEIVE_FULL.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any

from docflow_kernel.domain.chart import ChartTransition, MachineConfig, StateNode
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.purchase_order.machine")

DEFAULT_CONTEXT: dict[str, Any] = {
    "id": 0,
    "vendor_id": 0,
    "total_amount": Decimal("0"),
    "received_amount": Decimal("0"),
    "expected_date": None,
    "rejection_reason": None,
}


def _amount(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def _has_vendor_and_amount(ctx, event) -> bool:
    return _amount(ctx.get("total_amount")) > 0 and (ctx.get("vendor_id") or 0) > 0


def _receipt_leaves_balance(ctx, event) -> bool:
    received = _amount(ctx.get("received_amount")) + _amount(event.get("amount"))
    return received < _amount(ctx.get("total_amount"))


def _log_submitted(ctx, event) -> None:
    logger.info("purchase_order_submitted", extra={"purchase_order_id": ctx.get("id")})


def _log_approved(ctx, event) -> None:
    logger.info("purchase_order_approved", extra={"purchase_order_id": ctx.get("id")})


def _record_rejection(ctx, event) -> None:
    ctx["rejection_reason"] = event.get("reason")


def _clear_rejection(ctx, event) -> None:
    ctx["rejection_reason"] = None


def _log_sent_to_vendor(ctx, event) -> None:
    logger.info("purchase_order_sent_to_vendor", extra={"purchase_order_id": ctx.get("id")})


def _receive_partial(ctx, event) -> None:
    amount = _amount(event.get("amount"))
    ctx["received_amount"] = _amount(ctx.get("received_amount")) + amount
    logger.info(
        "purchase_order_partial_receipt",
        extra={"purchase_order_id": ctx.get("id"), "amount": amount},
    )


def _receive_full(ctx, event) -> None:
    ctx["received_amount"] = _amount(ctx.get("total_amount"))
    logger.info("purchase_order_fully_received", extra={"purchase_order_id": ctx.get("id")})


PURCHASE_ORDER_MACHINE = MachineConfig(
    id="purchase_order",
    initial="draft",
    context=DEFAULT_CONTEXT,
    states={
        "draft": StateNode(
            label="Draft",
            description="Purchase order is being prepared",
            on={
                "SUBMIT": ChartTransition(
                    target="submitted",
                    guard=_has_vendor_and_amount,
                    guard_message="PO must have a vendor and amount",
                    actions=(_log_submitted,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "submitted": StateNode(
            label="Submitted",
            description="Awaiting approval",
            on={
                "APPROVE": ChartTransition(target="approved", actions=(_log_approved,)),
                "REJECT": ChartTransition(target="rejected", actions=(_record_rejection,)),
                "CANCEL": "cancelled",
            },
        ),
        "approved": StateNode(
            label="Approved",
            description="Ready to send to vendor",
            on={
                "SEND_TO_VENDOR": ChartTransition(target="ordered", actions=(_log_sent_to_vendor,)),
                "CANCEL": "cancelled",
            },
        ),
        "rejected": StateNode(
            label="Rejected",
            description="PO was rejected",
            on={
                "SUBMIT": ChartTransition(target="submitted", actions=(_clear_rejection,)),
                "CANCEL": "cancelled",
            },
        ),
        "ordered": StateNode(
            label="Ordered",
            description="Order placed with vendor",
            on={
                "RECEIVE_PARTIAL": ChartTransition(
                    target="partial_received",
                    actions=(_receive_partial,),
                ),
                "RECEIVE_FULL": ChartTransition(target="received", actions=(_receive_full,)),
                "CANCEL": "cancelled",
            },
        ),
        "partial_received": StateNode(
            label="Partial",
            description="Partially received",
            on={
                "RECEIVE_PARTIAL": ChartTransition(
                    target="partial_received",
                    guard=_receipt_leaves_balance,
                    guard_message="Receipt completes the order; use RECEIVE_FULL",
                    actions=(_receive_partial,),
                ),
                "RECEIVE_FULL": ChartTransition(target="received", actions=(_receive_full,)),
            },
        ),
        "received": StateNode(label="Received", description="All goods received", final=True),
        "cancelled": StateNode(label="Cancelled", description="PO was cancelled", final=True),
    },
)


def create_purchase_order_machine(**context: Any) -> MachineConfig:
    """Purchase order chart with ``context`` merged over the defaults."""
    return replace(
        PURCHASE_ORDER_MACHINE,
        context={**PURCHASE_ORDER_MACHINE.context, **context},
    )
