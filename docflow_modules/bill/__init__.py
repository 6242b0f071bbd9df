"""Vendor bills (``docflow_modules.bill``)."""

from docflow_modules.bill.workflows import BILL_WORKFLOW

__all__ = ["BILL_WORKFLOW"]
