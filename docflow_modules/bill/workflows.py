"""
Bill Workflows (``docflow_modules.bill.workflows``).

Responsibility
--------------
Declares the action catalog for the vendor bill lifecycle::

    draft -> pending -> approved -> partial/paid
                    \\-> draft (reject)       \\-> overdue
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.bill.workflows")

ALL_STATUSES = frozenset({
    "draft", "pending", "approved", "partial", "paid", "overdue", "cancelled",
})
OPEN_PAYABLE = frozenset({"approved", "partial", "overdue"})

BILL_WORKFLOW = WorkflowCatalog(
    document_type="bill",
    description="Vendor bill lifecycle",
    initial_status="draft",
    actions=(
        WorkflowAction(
            name="submit",
            label="Submit for Approval",
            icon="Send",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"draft"}),
            target_status="pending",
        ),
        WorkflowAction(
            name="approve",
            label="Approve",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            allowed_from_statuses=frozenset({"pending"}),
            target_status="approved",
        ),
        WorkflowAction(
            name="reject",
            label="Reject",
            icon="XCircle",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to reject this bill?",
            allowed_from_statuses=frozenset({"pending"}),
            target_status="draft",
        ),
        WorkflowAction(
            name="record_payment",
            label="Record Payment",
            icon="CreditCard",
            variant=ActionVariant.SUCCESS,
            allowed_from_statuses=OPEN_PAYABLE,
        ),
        WorkflowAction(
            name="mark_paid",
            label="Mark as Paid",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            requires_confirmation=True,
            confirmation_message="Mark this bill as fully paid?",
            allowed_from_statuses=OPEN_PAYABLE,
            target_status="paid",
        ),
        WorkflowAction(
            name="cancel",
            label="Cancel Bill",
            icon="Ban",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to cancel this bill?",
            allowed_from_statuses=frozenset({"draft", "pending", "approved"}),
            target_status="cancelled",
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
    ),
)

logger.info(
    "bill_workflow_registered",
    extra={
        "document_type": BILL_WORKFLOW.document_type,
        "action_count": len(BILL_WORKFLOW.actions),
    },
)
