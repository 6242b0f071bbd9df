"""
Solar Proposal Workflows (``docflow_modules.solar_proposal.workflows``).

Responsibility
--------------
Declares the action catalog for the solar proposal lifecycle::

    draft -> sent -> viewed -> accepted
                           \\-> rejected
                           \\-> expired

``convert_to_quotation`` and ``revise`` create new documents and leave
the proposal's own status untouched.
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.solar_proposal.workflows")

ALL_STATUSES = frozenset({"draft", "sent", "viewed", "accepted", "rejected", "expired"})
AWAITING_CUSTOMER = frozenset({"sent", "viewed"})

SOLAR_PROPOSAL_WORKFLOW = WorkflowCatalog(
    document_type="solar_proposal",
    description="Solar proposal lifecycle",
    initial_status="draft",
    actions=(
        WorkflowAction(
            name="send",
            label="Send to Customer",
            icon="Send",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"draft"}),
            target_status="sent",
        ),
        WorkflowAction(
            name="resend",
            label="Resend",
            icon="RefreshCw",
            allowed_from_statuses=AWAITING_CUSTOMER,
        ),
        WorkflowAction(
            name="mark_accepted",
            label="Mark as Accepted",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            requires_confirmation=True,
            confirmation_message="Mark this proposal as accepted by the customer?",
            allowed_from_statuses=AWAITING_CUSTOMER,
            target_status="accepted",
        ),
        WorkflowAction(
            name="mark_rejected",
            label="Mark as Rejected",
            icon="XCircle",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Mark this proposal as rejected?",
            allowed_from_statuses=AWAITING_CUSTOMER,
            target_status="rejected",
        ),
        WorkflowAction(
            name="convert_to_quotation",
            label="Convert to Quotation",
            icon="FileText",
            variant=ActionVariant.PRIMARY,
            requires_confirmation=True,
            confirmation_message="Create a quotation from this proposal?",
            allowed_from_statuses=frozenset({"accepted"}),
        ),
        WorkflowAction(
            name="revise",
            label="Create Revision",
            icon="Edit",
            allowed_from_statuses=frozenset({"sent", "viewed", "rejected", "expired"}),
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
            name="view_analytics",
            label="View Analytics",
            icon="BarChart",
            allowed_from_statuses=frozenset({"sent", "viewed", "accepted", "rejected"}),
        ),
    ),
)

logger.info(
    "solar_proposal_workflow_registered",
    extra={
        "document_type": SOLAR_PROPOSAL_WORKFLOW.document_type,
        "action_count": len(SOLAR_PROPOSAL_WORKFLOW.actions),
    },
)
