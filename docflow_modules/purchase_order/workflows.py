"""
Purchase Order Workflows (``docflow_modules.purchase_order.workflows``).

Responsibility
--------------
Declares the action catalog for the purchase order lifecycle::

    draft -> submitted -> approved -> partial/received
                      \\-> rejected -> draft (revise)

``receive_goods`` records a goods receipt without itself choosing the
resulting status; ``mark_received`` closes the order explicitly.
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.purchase_order.workflows")

ALL_STATUSES = frozenset({
    "draft", "submitted", "approved", "rejected", "partial", "received", "cancelled",
})

PURCHASE_ORDER_WORKFLOW = WorkflowCatalog(
    document_type="purchase_order",
    description="Purchase order lifecycle",
    initial_status="draft",
    actions=(
        WorkflowAction(
            name="submit",
            label="Submit for Approval",
            icon="Send",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"draft"}),
            target_status="submitted",
        ),
        WorkflowAction(
            name="approve",
            label="Approve",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            allowed_from_statuses=frozenset({"submitted"}),
            target_status="approved",
        ),
        WorkflowAction(
            name="reject",
            label="Reject",
            icon="XCircle",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to reject this purchase order?",
            allowed_from_statuses=frozenset({"submitted"}),
            target_status="rejected",
        ),
        WorkflowAction(
            name="revise",
            label="Revise",
            icon="Edit",
            allowed_from_statuses=frozenset({"rejected"}),
            target_status="draft",
        ),
        WorkflowAction(
            name="receive_goods",
            label="Receive Goods",
            icon="Package",
            variant=ActionVariant.SUCCESS,
            allowed_from_statuses=frozenset({"approved", "partial"}),
        ),
        WorkflowAction(
            name="mark_received",
            label="Mark as Received",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            requires_confirmation=True,
            confirmation_message="Mark this PO as fully received?",
            allowed_from_statuses=frozenset({"approved", "partial"}),
            target_status="received",
        ),
        WorkflowAction(
            name="cancel",
            label="Cancel PO",
            icon="Ban",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to cancel this purchase order?",
            allowed_from_statuses=frozenset({"draft", "submitted", "approved"}),
            target_status="cancelled",
        ),
        WorkflowAction(
            name="create_bill",
            label="Create Bill",
            icon="FileText",
            allowed_from_statuses=frozenset({"approved", "partial", "received"}),
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
            name="send_to_vendor",
            label="Send to Vendor",
            icon="Mail",
            allowed_from_statuses=frozenset({"approved"}),
        ),
    ),
)

logger.info(
    "purchase_order_workflow_registered",
    extra={
        "document_type": PURCHASE_ORDER_WORKFLOW.document_type,
        "action_count": len(PURCHASE_ORDER_WORKFLOW.actions),
    },
)
