"""
Invoice Workflows (``docflow_modules.invoice.workflows``).

Responsibility
--------------
Declares the action catalog for the customer invoice lifecycle::

    draft -> sent -> partial/paid
                 \\-> overdue
    draft -> void
    sent/partial -> cancelled

``record_payment`` has no target status: the resulting status (partial
or paid) is decided by the persistence layer from the payment amount.
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.invoice.workflows")

ALL_STATUSES = frozenset({
    "draft", "sent", "partial", "paid", "overdue", "cancelled", "void",
})
OPEN_RECEIVABLE = frozenset({"sent", "partial", "overdue"})

INVOICE_WORKFLOW = WorkflowCatalog(
    document_type="invoice",
    description="Customer invoice lifecycle",
    initial_status="draft",
    actions=(
        WorkflowAction(
            name="send",
            label="Mark as Sent",
            icon="Send",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"draft"}),
            target_status="sent",
        ),
        WorkflowAction(
            name="record_payment",
            label="Record Payment",
            icon="CreditCard",
            variant=ActionVariant.SUCCESS,
            allowed_from_statuses=OPEN_RECEIVABLE,
        ),
        WorkflowAction(
            name="mark_paid",
            label="Mark as Paid",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            requires_confirmation=True,
            confirmation_message="Mark this invoice as fully paid?",
            allowed_from_statuses=OPEN_RECEIVABLE,
            target_status="paid",
        ),
        WorkflowAction(
            name="void",
            label="Void Invoice",
            icon="FileX",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message=(
                "Voiding will create a reversal entry. This cannot be undone. Continue?"
            ),
            allowed_from_statuses=frozenset({"draft"}),
            target_status="void",
        ),
        WorkflowAction(
            name="cancel",
            label="Cancel Invoice",
            icon="Ban",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to cancel this invoice?",
            allowed_from_statuses=frozenset({"sent", "partial"}),
            target_status="cancelled",
        ),
        WorkflowAction(
            name="send_reminder",
            label="Send Reminder",
            icon="Bell",
            variant=ActionVariant.WARNING,
            allowed_from_statuses=OPEN_RECEIVABLE,
        ),
        WorkflowAction(
            name="create_credit_note",
            label="Create Credit Note",
            icon="FileText",
            allowed_from_statuses=frozenset({"sent", "partial", "paid", "overdue"}),
        ),
        WorkflowAction(
            name="duplicate",
            label="Duplicate",
            icon="Copy",
            allowed_from_statuses=ALL_STATUSES,
        ),
        WorkflowAction(
            name="print",
            label="Print / PDF",
            icon="Printer",
            allowed_from_statuses=ALL_STATUSES,
        ),
        WorkflowAction(
            name="send_email",
            label="Send Email",
            icon="Mail",
            allowed_from_statuses=OPEN_RECEIVABLE,
        ),
    ),
)

logger.info(
    "invoice_workflow_registered",
    extra={
        "document_type": INVOICE_WORKFLOW.document_type,
        "action_count": len(INVOICE_WORKFLOW.actions),
    },
)
