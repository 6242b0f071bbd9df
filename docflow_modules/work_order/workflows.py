"""
Work Order Workflows (``docflow_modules.work_order.workflows``).

Responsibility
--------------
Declares the action catalog for the work order lifecycle::

    draft -> in_progress -> completed
                  ^  |
                  |  v
                 on_hold
"""

from docflow_kernel.domain.catalog import ActionVariant, WorkflowAction, WorkflowCatalog
from docflow_kernel.logging_config import get_logger

logger = get_logger("modules.work_order.workflows")

ALL_STATUSES = frozenset({"draft", "in_progress", "on_hold", "completed", "cancelled"})

WORK_ORDER_WORKFLOW = WorkflowCatalog(
    document_type="work_order",
    description="Work order lifecycle",
    initial_status="draft",
    actions=(
        WorkflowAction(
            name="start",
            label="Start Work",
            icon="Play",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"draft"}),
            target_status="in_progress",
        ),
        WorkflowAction(
            name="pause",
            label="Put on Hold",
            icon="Pause",
            variant=ActionVariant.WARNING,
            allowed_from_statuses=frozenset({"in_progress"}),
            target_status="on_hold",
        ),
        WorkflowAction(
            name="resume",
            label="Resume Work",
            icon="Play",
            variant=ActionVariant.PRIMARY,
            allowed_from_statuses=frozenset({"on_hold"}),
            target_status="in_progress",
        ),
        WorkflowAction(
            name="complete",
            label="Mark Complete",
            icon="CheckCircle",
            variant=ActionVariant.SUCCESS,
            requires_confirmation=True,
            confirmation_message="Mark this work order as completed?",
            allowed_from_statuses=frozenset({"in_progress"}),
            target_status="completed",
        ),
        WorkflowAction(
            name="cancel",
            label="Cancel Work Order",
            icon="Ban",
            variant=ActionVariant.DESTRUCTIVE,
            requires_confirmation=True,
            confirmation_message="Are you sure you want to cancel this work order?",
            allowed_from_statuses=frozenset({"draft", "in_progress", "on_hold"}),
            target_status="cancelled",
        ),
        WorkflowAction(
            name="add_materials",
            label="Add Materials",
            icon="Package",
            allowed_from_statuses=frozenset({"draft", "in_progress"}),
        ),
        WorkflowAction(
            name="log_time",
            label="Log Time",
            icon="Clock",
            allowed_from_statuses=frozenset({"in_progress", "on_hold"}),
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
    "work_order_workflow_registered",
    extra={
        "document_type": WORK_ORDER_WORKFLOW.document_type,
        "action_count": len(WORK_ORDER_WORKFLOW.actions),
    },
)
