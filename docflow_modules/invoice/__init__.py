"""
Invoice Module (``docflow_modules.invoice``).

Customer invoices: send, record payments, track overdue balances, void.

``record_payment`` drives the chart through its transient
``payment_check`` state and settles into ``paid`` or ``partial``.
"""

from docflow_modules.invoice.machine import (
    INVOICE_MACHINE,
    build_invoice_machine_config,
    create_invoice_machine,
    payment_target_state,
    record_payment,
)
from docflow_modules.invoice.workflows import INVOICE_WORKFLOW

__all__ = [
    "INVOICE_MACHINE",
    "INVOICE_WORKFLOW",
    "build_invoice_machine_config",
    "create_invoice_machine",
    "payment_target_state",
    "record_payment",
]
