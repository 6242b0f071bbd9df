"""
Quotation Module (``docflow_modules.quotation``).

Customer quotations: draft, submit for approval, approve or reject,
revise, and convert to an invoice.

Exposes both faces of the lifecycle:

* ``QUOTATION_WORKFLOW`` -- the status-keyed action catalog driven by
  ``docflow_services.DocumentWorkflow``.
* ``QUOTATION_MACHINE`` / ``create_quotation_machine`` -- the guarded
  chart driven by ``docflow_services.StateMachine``.
"""

from docflow_modules.quotation.machine import (
    QUOTATION_MACHINE,
    build_quotation_machine_config,
    create_quotation_machine,
)
from docflow_modules.quotation.workflows import QUOTATION_WORKFLOW

__all__ = [
    "QUOTATION_MACHINE",
    "QUOTATION_WORKFLOW",
    "build_quotation_machine_config",
    "create_quotation_machine",
]
