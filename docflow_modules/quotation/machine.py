"""
Quotation state machine (``docflow_modules.quotation.machine``).

Chart-face definition of the quotation lifecycle, for flows whose guards
depend on document data rather than status alone::

    draft -> submitted -> approved -> converted
      |         |           |  \\-> expired
      v         v           v
   cancelled  rejected   cancelled

Guards
------
* SUBMIT  -- total amount must be positive.
* CONVERT -- quotation must still be valid (``valid_until`` not passed).
* EXPIRE  -- ``valid_until`` must have passed.

Context keys: ``id``, ``contact_id``, ``total_amount``, ``valid_until``,
``rejection_reason``, ``converted_invoice_id``.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any

from docflow_kernel.domain.chart import ChartTransition, MachineConfig, StateNode
from docflow_kernel.domain.clock import Clock, SystemClock
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.quotation.machine")

DEFAULT_CONTEXT: dict[str, Any] = {
    "id": 0,
    "contact_id": 0,
    "total_amount": Decimal("0"),
    "valid_until": None,
    "rejection_reason": None,
    "converted_invoice_id": None,
}


def _has_amount(ctx, event) -> bool:
    return Decimal(str(ctx.get("total_amount") or 0)) > 0


def _log_submitted(ctx, event) -> None:
    logger.info("quotation_submitted", extra={"quotation_id": ctx.get("id")})


def _log_entered_submitted(ctx, event) -> None:
    logger.debug("quotation_entered_submitted", extra={"quotation_id": ctx.get("id")})


def _log_approved(ctx, event) -> None:
    logger.info("quotation_approved", extra={"quotation_id": ctx.get("id")})


def _record_rejection(ctx, event) -> None:
    ctx["rejection_reason"] = event.get("reason")
    logger.info(
        "quotation_rejected",
        extra={"quotation_id": ctx.get("id"), "reason": ctx["rejection_reason"]},
    )


def _record_conversion(ctx, event) -> None:
    if event.get("invoice_id"):
        ctx["converted_invoice_id"] = event["invoice_id"]
    logger.info(
        "quotation_converted",
        extra={"quotation_id": ctx.get("id"), "invoice_id": ctx.get("converted_invoice_id")},
    )


def _clear_rejection(ctx, event) -> None:
    ctx["rejection_reason"] = None
    logger.info("quotation_revised", extra={"quotation_id": ctx.get("id")})


def build_quotation_machine_config(clock: Clock | None = None) -> MachineConfig:
    """Quotation chart; validity guards read today's date from ``clock``."""
    clock = clock or SystemClock()

    def still_valid(ctx, event) -> bool:
        valid_until = ctx.get("valid_until")
        return valid_until is None or clock.today() <= valid_until

    def past_validity(ctx, event) -> bool:
        valid_until = ctx.get("valid_until")
        return valid_until is not None and clock.today() > valid_until

    return MachineConfig(
        id="quotation",
        initial="draft",
        context=DEFAULT_CONTEXT,
        states={
            "draft": StateNode(
                label="Draft",
                description="Quotation is being prepared",
                on={
                    "SUBMIT": ChartTransition(
                        target="submitted",
                        guard=_has_amount,
                        guard_message="Cannot submit quotation with zero amount",
                        actions=(_log_submitted,),
                    ),
                    "CANCEL": "cancelled",
                },
            ),
            "submitted": StateNode(
                label="Submitted",
                description="Awaiting approval",
                entry=(_log_entered_submitted,),
                on={
                    "APPROVE": ChartTransition(target="approved", actions=(_log_approved,)),
                    "REJECT": ChartTransition(target="rejected", actions=(_record_rejection,)),
                    "CANCEL": "cancelled",
                },
            ),
            "approved": StateNode(
                label="Approved",
                description="Ready for conversion to invoice",
                on={
                    "CONVERT": ChartTransition(
                        target="converted",
                        guard=still_valid,
                        guard_message="Cannot convert expired quotation",
                        actions=(_record_conversion,),
                    ),
                    "EXPIRE": ChartTransition(
                        target="expired",
                        guard=past_validity,
                        guard_message="Quotation has not expired yet",
                    ),
                    "CANCEL": "cancelled",
                },
            ),
            "rejected": StateNode(
                label="Rejected",
                description="Quotation was rejected",
                on={
                    "REVISE": ChartTransition(target="draft", actions=(_clear_rejection,)),
                    "CANCEL": "cancelled",
                },
            ),
            "converted": StateNode(label="Converted", description="Converted to invoice", final=True),
            "expired": StateNode(label="Expired", description="Past validity date", final=True),
            "cancelled": StateNode(label="Cancelled", description="Quotation was cancelled", final=True),
        },
    )


QUOTATION_MACHINE = build_quotation_machine_config()


def create_quotation_machine(clock: Clock | None = None, **context: Any) -> MachineConfig:
    """Quotation chart with ``context`` merged over the defaults."""
    base = build_quotation_machine_config(clock) if clock is not None else QUOTATION_MACHINE
    return replace(base, context={**base.context, **context})
