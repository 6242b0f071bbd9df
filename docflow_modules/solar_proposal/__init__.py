"""
Solar Proposal Module (``docflow_modules.solar_proposal``).

Customer-facing solar proposals: send, track views, accept or reject.
"""

from docflow_modules.solar_proposal.workflows import SOLAR_PROPOSAL_WORKFLOW

__all__ = ["SOLAR_PROPOSAL_WORKFLOW"]
