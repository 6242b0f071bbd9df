"""
Purchase Order Module (``docflow_modules.purchase_order``).

Vendor purchase orders: approval, dispatch to the vendor, and receiving.
"""

from docflow_modules.purchase_order.machine import (
    PURCHASE_ORDER_MACHINE,
    create_purchase_order_machine,
)
from docflow_modules.purchase_order.workflows import PURCHASE_ORDER_WORKFLOW

__all__ = [
    "PURCHASE_ORDER_MACHINE",
    "PURCHASE_ORDER_WORKFLOW",
    "create_purchase_order_machine",
]
