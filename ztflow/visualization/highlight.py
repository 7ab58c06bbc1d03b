"""
Highlight policy for diagram nodes.

The per-scenario rules are compiled once into a HighlightTable keyed by
(scenario, step index). Looking up a node's highlight is then a table read
rather than a chain of index-range checks.

Rule precedence, first match wins for colour:
1. Firewall: always lit; green only inside the success authorization window.
2. Terminal failure: the Client is forced red on the last failure step.
3. Path rules: the data-return set (success) and the whole path (failure).
4. Endpoint rule: source and target of the current step.
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

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from ..core.topology import DEFAULT_TOPOLOGY, NodeRole, Scenario, Topology

FIREWALL_OPEN_WINDOW = (5, 6)
DATA_RETURN_FROM_INDEX = 13
DATA_RETURN_ROLES = (NodeRole.CLIENT, NodeRole.FRONT_END, NodeRole.FIREWALL, NodeRole.BACK_END)


class HighlightColor(Enum):
    """Node fill colours."""

    GREEN = "#4CAF50"
    RED = "#FF0000"
    IDLE = "#f0f0f0"


@dataclass(frozen=True)
class HighlightResult:
    node_id: int
    highlighted: bool
    color: HighlightColor

    @property
    def on(self) -> bool:
        return self.highlighted


@dataclass(frozen=True)
class HighlightFrame:
    """Highlight decision for every node at one (scenario, step index)."""

    highlighted_node_ids: FrozenSet[int]
    firewall_color: HighlightColor
    overrides: Mapping[int, HighlightColor] = field(default_factory=dict)


class HighlightTable:
    """
    Precomputed highlight frames for every step of every scenario.

    Indices without a step (the -1 sentinel, or past the end) resolve to the
    idle frame: only the Firewall is lit, in red.
    """

    def __init__(self, topology: Topology = DEFAULT_TOPOLOGY):
        self.topology = topology
        self._firewall_id = topology.node_id(NodeRole.FIREWALL)
        self._client_id = topology.node_id(NodeRole.CLIENT)
        self._idle_frame = HighlightFrame(
            highlighted_node_ids=frozenset({self._firewall_id}),
            firewall_color=HighlightColor.RED,
        )
        self._frames: Dict[Tuple[Scenario, int], HighlightFrame] = {}
        for scenario in Scenario:
            for index in range(topology.step_count(scenario)):
                self._frames[(scenario, index)] = self._build_frame(scenario, index)

    def _build_frame(self, scenario: Scenario, index: int) -> HighlightFrame:
        topology = self.topology
        step = topology.step_at(scenario, index)
        lit = {self._firewall_id, step.source, step.target}
        overrides: Dict[int, HighlightColor] = {}

        if scenario is Scenario.SUCCESS:
            firewall_color = (
                HighlightColor.GREEN
                if FIREWALL_OPEN_WINDOW[0] <= index <= FIREWALL_OPEN_WINDOW[1]
                else HighlightColor.RED
            )
            if index >= DATA_RETURN_FROM_INDEX:
                lit.update(topology.node_id(role) for role in DATA_RETURN_ROLES)
        else:
            firewall_color = HighlightColor.RED
            lit.update(node.id for node in topology.nodes)
            if index == topology.last_index(scenario):
                overrides[self._client_id] = HighlightColor.RED

        return HighlightFrame(
            highlighted_node_ids=frozenset(lit),
            firewall_color=firewall_color,
            overrides=overrides,
        )

    def frame(self, scenario: Union[Scenario, str], step_index: int) -> HighlightFrame:
        scenario = Scenario.parse(scenario)
        return self._frames.get((scenario, step_index), self._idle_frame)

    def lookup(
        self, scenario: Union[Scenario, str], step_index: int, node_id: int
    ) -> HighlightResult:
        node = self.topology.node_at(node_id)
        frame = self.frame(scenario, step_index)

        if node.id == self._firewall_id:
            return HighlightResult(node.id, True, frame.firewall_color)

        if node.id in frame.overrides:
            return HighlightResult(node.id, True, frame.overrides[node.id])

        if node.id in frame.highlighted_node_ids:
            return HighlightResult(node.id, True, HighlightColor.GREEN)

        return HighlightResult(node.id, False, HighlightColor.IDLE)

    def lookup_all(self, scenario: Union[Scenario, str], step_index: int) -> List[HighlightResult]:
        return [self.lookup(scenario, step_index, node.id) for node in self.topology.nodes]


_default_table: Optional[HighlightTable] = None


def get_highlight_table(topology: Optional[Topology] = None) -> HighlightTable:
    """Get the shared table for the default topology, or build one for another."""
    global _default_table

    if topology is not None and topology is not DEFAULT_TOPOLOGY:
        return HighlightTable(topology)

    if _default_table is None:
        _default_table = HighlightTable(DEFAULT_TOPOLOGY)
    return _default_table


def highlight(
    scenario: Union[Scenario, str],
    current_step_index: int,
    node_id: int,
    topology: Optional[Topology] = None,
) -> HighlightResult:
    """Highlight state and colour of a node at a playback instant."""
    return get_highlight_table(topology).lookup(scenario, current_step_index, node_id)
