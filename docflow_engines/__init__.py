"""
docflow_engines -- pure calculation engines.

Availability and guard evaluation over catalogs, the catalog-to-chart
projection, and the visualization exporter.  Engines import only from
``docflow_kernel``; they hold no state and perform no I/O.
"""

from docflow_engines.availability import available_actions, blocking_reason, can_execute
from docflow_engines.projection import project_catalog
from docflow_engines.visualization import (
    catalog_to_visualization,
    machine_to_diagram_text,
    to_ascii_diagram,
    to_diagram_text,
    to_graph,
)

__all__ = [
    "available_actions",
    "blocking_reason",
    "can_execute",
    "catalog_to_visualization",
    "machine_to_diagram_text",
    "project_catalog",
    "to_ascii_diagram",
    "to_diagram_text",
    "to_graph",
]
