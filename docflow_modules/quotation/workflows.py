"""
Quotation Workflows (``docflow_modules.quotation.workflows``).

Responsibility
--------------
Declares the action catalog for the quotation lifecycle::

    draft -> submitted -> approved -> converted
                       \\-> rejected -> draft (revise)
    any open status -> cancelled

Architecture position
---------------------
**Modules layer** -- declarative workflow definitions.  Imports the
canonical ``WorkflowAction`` and ``WorkflowCatalog`` from
``docflow_kernel.domain.catalog``.

Audit relevance
---------------
The catalog is logged at module-load time with its action count.
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.quotation.workflows")

ALL_STATUSES = frozenset({
    "draft", "submitted", "approved", "rejected", "expired", "converted", "cancelled",
})

QUOTATION_WORKFLOW = WorkflowCatalog(
    document_type="quotation",
    description="Sales quotation lifecycle",
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
            confirmation_message=(
                "Are you sure you want to reject this quotation? "
                "This action will notify the creator."
            ),
            allowed_from_statuses=frozenset({"submitted"}),
            target_status="rejected",
        ),
        WorkflowAction(
            name="revise",
            label="Revise",
            icon="Edit",
            variant=ActionVariant.SECONDARY,
            allowed_from_statuses=frozenset({"rejected"}),
            target_status="draft",
        ),
        WorkflowAction(
            name="convert",
            label="Convert to Invoice",
            icon="FileText",
            variant=ActionVariant.PRIMARY,
            requires_confirmation=True,
            confirmation_message="This will create an invoice from this quotation. Continue?",
            allowed_from_statuses=frozenset({"approved"}),
            target_status="converted",
        ),
        WorkflowAction(
            name="cancel",
            label="Cancel Quotation",
            icon="Ban",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message=(
                "Are you sure you want to cancel this quotation? "
                "This action cannot be undone."
            ),
            allowed_from_statuses=frozenset({"draft", "submitted", "approved", "rejected", "expired"}),
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
        WorkflowAction(
            name="send_email",
            label="Send Email",
            icon="Mail",
            allowed_from_statuses=frozenset({"submitted", "approved"}),
        ),
    ),
)

logger.info(
    "quotation_workflow_registered",
    extra={
        "document_type": QUOTATION_WORKFLOW.document_type,
        "action_count": len(QUOTATION_WORKFLOW.actions),
    },
)
