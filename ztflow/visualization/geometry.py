"""
Geometry resolver for arrows and the moving data marker.

Pure functions over node coordinates. Nothing here is cached; callers
recompute per frame.
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

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

from ..core.topology import Node, NodeRole, Scenario, Step
from ..exceptions import IndexOutOfRange

# Centers a 20px marker on a 60px node glyph.
MARKER_OFFSET = 20.0

# Success indices during which the marker travels straight from Back-end to Client.
DATA_RETURN_START = 13
DATA_RETURN_END = 14

# Failure indices after the decision, during which the marker stays at the IdP.
FAILURE_PENDING_START = 5


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class ArrowGeometry:
    """Placement of a (partially grown) arrow between two nodes."""

    origin: Point
    angle_degrees: float
    full_length: float
    length_at_progress: float
    marker_position: Point
    progress: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "origin": self.origin.to_dict(),
            "angle_degrees": self.angle_degrees,
            "full_length": self.full_length,
            "length_at_progress": self.length_at_progress,
            "marker_position": self.marker_position.to_dict(),
            "progress": self.progress,
        }


def distance(start: Node, end: Node) -> float:
    return math.hypot(end.x - start.x, end.y - start.y)


def interpolate(start: Node, end: Node, t: float, offset: float = MARKER_OFFSET) -> Point:
    """Linear interpolation between two nodes, shifted by offset on both axes."""
    return Point(
        x=start.x + offset + (end.x - start.x) * t,
        y=start.y + offset + (end.y - start.y) * t,
    )


def arrow_geometry(
    start: Node, end: Node, progress: float, offset: float = MARKER_OFFSET
) -> ArrowGeometry:
    """
    Compute arrow placement for a hop at the given progress.

    Args:
        start: Source node
        end: Target node
        progress: Fraction of the hop revealed, in [0, 1]
        offset: Marker offset so it centers on the node glyph

    Returns:
        ArrowGeometry with the rotation, visible length and marker center
    """
    if not 0.0 <= progress <= 1.0:
        raise ValueError(f"progress must be within [0, 1], got {progress}")

    dx = end.x - start.x
    dy = end.y - start.y
    full_length = math.hypot(dx, dy)

    return ArrowGeometry(
        origin=Point(start.x, start.y),
        angle_degrees=math.degrees(math.atan2(dy, dx)),
        full_length=full_length,
        length_at_progress=full_length * progress,
        marker_position=interpolate(start, end, progress, offset),
        progress=progress,
    )


def _node_for(nodes: Sequence[Node], role: NodeRole) -> Node:
    for node in nodes:
        if node.role is role:
            return node
    raise IndexOutOfRange("node", -1, len(nodes))


def _target_of(step: Step, nodes: Sequence[Node]) -> Node:
    if not 0 <= step.target < len(nodes):
        raise IndexOutOfRange("node", step.target, len(nodes))
    return nodes[step.target]


def marker_position(
    scenario: Union[Scenario, str],
    current_step_index: int,
    steps: Sequence[Step],
    nodes: Sequence[Node],
    offset: float = MARKER_OFFSET,
) -> Optional[Point]:
    """
    Position of the data marker, or None when it is hidden.

    The marker is hidden whenever no step exists at current_step_index,
    which includes the -1 "not started" sentinel.
    """
    scenario = Scenario.parse(scenario)
    if not 0 <= current_step_index < len(steps):
        return None

    if scenario is Scenario.FAILURE:
        if current_step_index >= FAILURE_PENDING_START:
            idp = _node_for(nodes, NodeRole.IDP)
            return Point(idp.x + offset, idp.y + offset)
        target = _target_of(steps[current_step_index], nodes)
        return Point(target.x + offset, target.y + offset)

    if DATA_RETURN_START <= current_step_index <= DATA_RETURN_END:
        backend = _node_for(nodes, NodeRole.BACK_END)
        client = _node_for(nodes, NodeRole.CLIENT)
        t = current_step_index - DATA_RETURN_START
        return interpolate(backend, client, t, offset)

    target = _target_of(steps[current_step_index], nodes)
    return Point(target.x + offset, target.y + offset)


def return_path_geometry(
    scenario: Union[Scenario, str],
    current_step_index: int,
    nodes: Sequence[Node],
    offset: float = MARKER_OFFSET,
) -> Optional[ArrowGeometry]:
    """Full Back-end to Client arrow drawn while returned data is in flight."""
    scenario = Scenario.parse(scenario)
    if scenario is not Scenario.SUCCESS:
        return None
    if current_step_index not in (DATA_RETURN_END, DATA_RETURN_END + 1):
        return None
    return arrow_geometry(
        _node_for(nodes, NodeRole.BACK_END), _node_for(nodes, NodeRole.CLIENT), 1.0, offset
    )
