"""
State machine visualization.

Pure conversions of a ``MachineVisualization`` into:

* Mermaid ``stateDiagram-v2`` text (``to_diagram_text``)
* a plain-text listing for logs and debugging (``to_ascii_diagram``)
* a generic node/edge graph for custom renderers (``to_graph``)

No guards are evaluated and nothing is written anywhere.
"""

from __future__ import annotations

import html
import re
from typing import Any, Protocol

from docflow_kernel.domain.catalog import WorkflowCatalog
from docflow_kernel.domain.chart import MachineVisualization, build_visualization
from docflow_engines.projection import project_catalog

CURRENT_STATE_STYLE = "fill:#f97316,color:#fff"

MARKER_CURRENT = "→"
MARKER_FINAL = "◉"
MARKER_STATE = "○"


class Visualizable(Protocol):
    def to_visualization(self) -> MachineVisualization:
        ...


def mm_text(text: str) -> str:
    """Escape text for Mermaid labels."""
    normalized = re.sub(r"\s+", " ", html.unescape(str(text))).strip()
    return (
        normalized.replace("&", "#amp;")
        .replace("<", "#lt;")
        .replace(">", "#gt;")
        .replace('"', "#quot;")
        .replace("|", "#124;")
    )


def to_diagram_text(viz: MachineVisualization) -> str:
    """Generate a Mermaid state diagram."""
    lines = ["stateDiagram-v2"]

    for state in viz.states:
        lines.append(f"    {state.name} : {mm_text(state.label)}")

    initial = viz.initial or (viz.states[0].name if viz.states else None)
    if initial:
        lines.append(f"    [*] --> {initial}")

    for t in viz.transitions:
        lines.append(f"    {t.source} --> {t.target} : {mm_text(t.event)}")

    for state in viz.states:
        if state.final:
            lines.append(f"    {state.name} --> [*]")

    if viz.current_state:
        lines.append("")
        lines.append(f"    classDef current {CURRENT_STATE_STYLE}")
        lines.append(f"    class {viz.current_state} current")

    return "\n".join(lines)


def to_ascii_diagram(viz: MachineVisualization) -> str:
    """Plain-text listing of states and transitions."""
    lines = [f"State Machine: {viz.id}", "=" * 40, "", "States:"]

    for state in viz.states:
        if state.name == viz.current_state:
            marker = MARKER_CURRENT
        elif state.final:
            marker = MARKER_FINAL
        else:
            marker = MARKER_STATE
        lines.append(f"  {marker} {state.name} ({state.label})")

    lines.append("")
    lines.append("Transitions:")
    for t in viz.transitions:
        lines.append(f"  {t.source} --[{t.event}]--> {t.target}")

    return "\n".join(lines)


def to_graph(viz: MachineVisualization) -> dict[str, list[dict[str, Any]]]:
    """Generic ``{"nodes": [...], "edges": [...]}`` graph."""
    return {
        "nodes": [
            {
                "id": state.name,
                "label": state.label,
                "final": state.final,
                "current": state.name == viz.current_state,
            }
            for state in viz.states
        ],
        "edges": [
            {"from": t.source, "to": t.target, "label": t.event}
            for t in viz.transitions
        ],
    }


def machine_to_diagram_text(machine: Visualizable) -> str:
    """Mermaid diagram for anything exposing ``to_visualization()``."""
    return to_diagram_text(machine.to_visualization())


def catalog_to_visualization(
    catalog: WorkflowCatalog,
    current_status: str = "",
) -> MachineVisualization:
    """Visualization of a catalog's status-changing actions."""
    return build_visualization(project_catalog(catalog), current_status)
