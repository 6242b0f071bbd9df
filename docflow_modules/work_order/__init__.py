"""Work orders (``docflow_modules.work_order``)."""

from docflow_modules.work_order.workflows import WORK_ORDER_WORKFLOW

__all__ = ["WORK_ORDER_WORKFLOW"]
