"""
docflow kernel

Pure value objects, typed exceptions and structured logging for the
business-document lifecycle engine:
- Action catalogs gated by allowed-from statuses
- Chart state machines with guarded transitions
- Workflow event vocabulary shared by both faces
"""

__version__ = "0.1.0"
