"""
Frame renderer for the zero trust flow diagram.

Combines the topology, highlight policy and geometry resolver into a
FlowFrame for one playback instant, and renders it as ASCII, SVG, JSON or a
rich renderable for the live terminal view.
"""

"""
Copyright (c) 2025 Firefly Software Solutions Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at:

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Any, Dict, List, Optional, TextIO

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config.flow_config import FlowConfig
from ..core.playback_state import PlaybackState
from ..core.topology import DEFAULT_TOPOLOGY, Direction, Node, NodeRole, Step, Topology
from .geometry import ArrowGeometry, Point, arrow_geometry, marker_position, return_path_geometry
from .highlight import HighlightColor, HighlightResult, HighlightTable, get_highlight_table


class OutputFormat(Enum):
    """Supported output formats for frame rendering."""

    ASCII = "ascii"
    SVG = "svg"
    JSON = "json"


ARROW_COLOR = "#007BFF"
MARKER_COLOR = "red"

_DIRECTION_GLYPHS = {
    Direction.UP: "↑",
    Direction.DOWN: "↓",
    Direction.LEFT: "←",
    Direction.RIGHT: "→",
}

_RICH_STYLES = {
    HighlightColor.GREEN: "bold white on green",
    HighlightColor.RED: "bold white on red",
    HighlightColor.IDLE: "dim",
}


@dataclass(frozen=True)
class NodeView:
    node: Node
    highlight: HighlightResult


@dataclass(frozen=True)
class FlowFrame:
    """Everything the diagram shows at one playback instant."""

    state: PlaybackState
    nodes: List[NodeView]
    step: Optional[Step]
    arrow: Optional[ArrowGeometry]
    marker: Optional[Point]
    return_path: Optional[ArrowGeometry]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.to_dict(),
            "nodes": [
                {
                    "id": view.node.id,
                    "label": view.node.label,
                    "x": view.node.x,
                    "y": view.node.y,
                    "highlighted": view.highlight.highlighted,
                    "color": view.highlight.color.value,
                }
                for view in self.nodes
            ],
            "step": (
                {
                    "from": self.step.source,
                    "to": self.step.target,
                    "direction": self.step.direction.value,
                }
                if self.step
                else None
            ),
            "arrow": self.arrow.to_dict() if self.arrow else None,
            "marker": self.marker.to_dict() if self.marker else None,
            "return_path": self.return_path.to_dict() if self.return_path else None,
        }


class FlowRenderer:
    """
    Renders playback states of a topology.

    Frames are rebuilt from scratch for every call; nothing is cached
    between steps.
    """

    def __init__(self, topology: Topology = DEFAULT_TOPOLOGY, config: Optional[FlowConfig] = None):
        self.topology = topology
        self.config = config or FlowConfig()
        self.highlights: HighlightTable = get_highlight_table(topology)

    def build_frame(self, state: PlaybackState) -> FlowFrame:
        """Derive the frame for a playback state."""
        scenario = state.scenario
        index = state.current_step_index
        offset = self.config.layout.marker_offset
        nodes = self.topology.nodes
        step = self.topology.step_at(scenario, index)

        arrow = None
        if step is not None:
            arrow = arrow_geometry(
                self.topology.node_at(step.source),
                self.topology.node_at(step.target),
                state.arrow_progress,
                offset,
            )

        return FlowFrame(
            state=state,
            nodes=[
                NodeView(node=node, highlight=self.highlights.lookup(scenario, index, node.id))
                for node in nodes
            ],
            step=step,
            arrow=arrow,
            marker=marker_position(
                scenario, index, self.topology.steps_for(scenario), nodes, offset
            ),
            return_path=return_path_geometry(scenario, index, nodes, offset),
        )

    def render(
        self, state: PlaybackState, format: OutputFormat, output: Optional[TextIO] = None
    ) -> str:
        """
        Render a playback state in the specified format.

        Args:
            state: Playback state to render
            format: Output format for rendering
            output: Optional output stream to write to

        Returns:
            Rendered frame as string
        """
        frame = self.build_frame(state)

        if format == OutputFormat.ASCII:
            result = self._render_ascii(frame)
        elif format == OutputFormat.SVG:
            result = self._render_svg(frame)
        elif format == OutputFormat.JSON:
            result = json.dumps(frame.to_dict(), indent=2)
        else:
            raise ValueError(f"Unsupported output format: {format}")

        if output:
            output.write(result)

        return result

    def _step_caption(self, frame: FlowFrame) -> str:
        state = frame.state
        last = self.topology.last_index(state.scenario)
        if not state.has_started:
            return f"{state.scenario.value}: not started"
        return f"{state.scenario.value}: step {state.current_step_index}/{last}"

    def _hop_caption(self, frame: FlowFrame) -> Optional[str]:
        if frame.step is None:
            return None
        source = self.topology.node_at(frame.step.source).label
        target = self.topology.node_at(frame.step.target).label
        glyph = _DIRECTION_GLYPHS[frame.step.direction]
        percent = int(frame.state.arrow_progress * 100)
        return f"{source} {glyph} {target} ({percent}%)"

    def _render_ascii(self, frame: FlowFrame) -> str:
        lines = []
        lines.append(f"Zero Trust Flow [{self._step_caption(frame)}]")
        lines.append("=" * 50)

        for view in frame.nodes:
            mark = "*" if view.highlight.highlighted else " "
            color = view.highlight.color.name.lower() if view.highlight.highlighted else "-"
            lines.append(f"  [{mark}] {view.node.label:<10} {color}")

        hop = self._hop_caption(frame)
        if hop:
            lines.append(f"\nHop: {hop}")
        if frame.marker:
            lines.append(f"Marker: ({frame.marker.x:.0f}, {frame.marker.y:.0f})")
        if frame.return_path:
            lines.append("Return path: Back-end ──→ Client")
        if frame.state.status:
            lines.append(f"\n{frame.state.status}")

        return "\n".join(lines)

    def _render_svg(self, frame: FlowFrame) -> str:
        layout = self.config.layout
        radius = layout.icon_size / 2
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{layout.canvas_width}" '
            f'height="{layout.canvas_height}">'
        ]

        if frame.return_path:
            backend = self.topology.node_for(NodeRole.BACK_END)
            client = self.topology.node_for(NodeRole.CLIENT)
            parts.append(
                f'  <line x1="{backend.x}" y1="{backend.y + radius}" x2="{client.x}" '
                f'y2="{client.y + radius}" stroke="{HighlightColor.GREEN.value}" stroke-width="2"/>'
            )
            parts.append(self._svg_arrow(frame.return_path))

        if frame.arrow:
            parts.append(self._svg_arrow(frame.arrow))

        for view in frame.nodes:
            node = view.node
            fill = view.highlight.color.value
            text_fill = "white" if view.highlight.highlighted else "black"
            cx, cy = node.x + radius, node.y + radius
            parts.append(
                f'  <circle cx="{cx}" cy="{cy}" r="{radius}" fill="{fill}" '
                f'data-node-id="{node.id}"/>'
            )
            parts.append(
                f'  <text x="{cx}" y="{cy + 4}" text-anchor="middle" font-size="10" '
                f'fill="{text_fill}">{escape(node.label[:3])}</text>'
            )
            parts.append(
                f'  <text x="{cx}" y="{node.y + layout.icon_size + 15}" text-anchor="middle" '
                f'font-family="Arial" font-size="12">{escape(node.label)}</text>'
            )

        if frame.marker:
            marker_radius = layout.marker_size / 2
            parts.append(
                f'  <circle cx="{frame.marker.x + marker_radius}" '
                f'cy="{frame.marker.y + marker_radius}" r="{marker_radius}" '
                f'fill="{MARKER_COLOR}" class="marker"/>'
            )

        if frame.state.status:
            parts.append(
                f'  <text x="10" y="{layout.canvas_height - 10}" font-family="Arial" '
                f'font-size="14">{escape(frame.state.status)}</text>'
            )

        parts.append("</svg>")
        return "\n".join(parts)

    @staticmethod
    def _svg_arrow(arrow: ArrowGeometry) -> str:
        angle = math.radians(arrow.angle_degrees)
        x2 = arrow.origin.x + math.cos(angle) * arrow.length_at_progress
        y2 = arrow.origin.y + math.sin(angle) * arrow.length_at_progress
        return (
            f'  <line x1="{arrow.origin.x}" y1="{arrow.origin.y}" x2="{x2:.2f}" y2="{y2:.2f}" '
            f'stroke="{ARROW_COLOR}" stroke-width="2" class="arrow"/>'
        )

    def render_rich(self, state: PlaybackState) -> Panel:
        """Rich renderable of a playback state for the live terminal view."""
        frame = self.build_frame(state)

        table = Table(show_header=False, box=box.ROUNDED, border_style="blue")
        for _ in frame.nodes:
            table.add_column(justify="center")
        table.add_row(
            *[
                Text(f" {view.node.label} ", style=_RICH_STYLES[view.highlight.color])
                for view in frame.nodes
            ]
        )

        body = [table]
        hop = self._hop_caption(frame)
        if hop:
            body.append(Text(f"Hop: {hop}", style="cyan"))
        if frame.return_path:
            body.append(Text("Returning data: Back-end → Client", style="green"))
        if state.status:
            style = "green" if state.is_done and "granted" in state.status.lower() else "red bold"
            body.append(Text(state.status, style=style))

        return Panel(
            Group(*body),
            title=f"Zero Trust Flow [{self._step_caption(frame)}]",
            border_style="cyan",
        )
