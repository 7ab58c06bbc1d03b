"""
Topology - static description of the zero trust flow diagram.

Holds the seven diagram nodes and the ordered step tables of the success and
failure scenarios. Steps are declared by node role and resolved to node ids
when the topology is built, so callers never depend on node ordering.
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

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..exceptions import IndexOutOfRange, InvalidScenario


class Scenario(Enum):
    """Outcome path played back by the diagram."""

    SUCCESS = "success"
    FAILURE = "failure"

    @classmethod
    def parse(cls, value: Union["Scenario", str]) -> "Scenario":
        """Coerce a scenario or its string value, raising InvalidScenario otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidScenario(value)


class Direction(Enum):
    """Arrow glyph direction for a step."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class NodeRole(Enum):
    """Named identity of a diagram node; the value is its display label."""

    CLIENT = "Client"
    FRONT_END = "Front-end"
    FIREWALL = "Firewall"
    PDP = "PDP"
    IDP = "IdP"
    PEP = "PEP"
    BACK_END = "Back-end"


@dataclass(frozen=True)
class Node:
    """A diagram node. Its id is its index within the topology."""

    id: int
    role: NodeRole
    label: str
    x: float
    y: float


@dataclass(frozen=True)
class Step:
    """One directed hop between two nodes."""

    source: int
    target: int
    direction: Direction


# Layout order is the node id order.
NODE_LAYOUT: Tuple[Tuple[NodeRole, float, float], ...] = (
    (NodeRole.CLIENT, 50, 150),
    (NodeRole.FRONT_END, 200, 150),
    (NodeRole.FIREWALL, 350, 150),
    (NodeRole.PDP, 500, 150),
    (NodeRole.IDP, 500, 300),
    (NodeRole.PEP, 650, 150),
    (NodeRole.BACK_END, 800, 150),
)

_R = NodeRole
_D = Direction

SUCCESS_STEPS: Tuple[Tuple[NodeRole, NodeRole, Direction], ...] = (
    (_R.CLIENT, _R.FRONT_END, _D.RIGHT),
    (_R.FRONT_END, _R.FIREWALL, _D.RIGHT),
    (_R.FIREWALL, _R.PDP, _D.RIGHT),
    (_R.PDP, _R.IDP, _D.DOWN),
    (_R.IDP, _R.PDP, _D.UP),  # identity verified
    (_R.PDP, _R.PEP, _D.RIGHT),
    (_R.PEP, _R.FIREWALL, _D.RIGHT),
    (_R.FIREWALL, _R.BACK_END, _D.RIGHT),
    (_R.BACK_END, _R.FIREWALL, _D.LEFT),
    (_R.FIREWALL, _R.FRONT_END, _D.LEFT),
    (_R.FRONT_END, _R.CLIENT, _D.LEFT),
    (_R.CLIENT, _R.FRONT_END, _D.RIGHT),
    (_R.FRONT_END, _R.FIREWALL, _D.RIGHT),
    (_R.FIREWALL, _R.BACK_END, _D.RIGHT),
    (_R.BACK_END, _R.CLIENT, _D.LEFT),  # data leaves the back-end
    (_R.BACK_END, _R.CLIENT, _D.LEFT),  # data arrives at the client
)

FAILURE_STEPS: Tuple[Tuple[NodeRole, NodeRole, Direction], ...] = (
    (_R.CLIENT, _R.FRONT_END, _D.RIGHT),
    (_R.FRONT_END, _R.FIREWALL, _D.RIGHT),
    (_R.FIREWALL, _R.PDP, _D.RIGHT),
    (_R.PDP, _R.IDP, _D.DOWN),
    (_R.IDP, _R.PDP, _D.UP),  # identity rejected
    (_R.PDP, _R.FIREWALL, _D.LEFT),
    (_R.FIREWALL, _R.FRONT_END, _D.LEFT),
    (_R.FRONT_END, _R.CLIENT, _D.LEFT),
)


class Topology:
    """
    Immutable node and step tables.

    Nodes are addressed by integer id (their index) or by NodeRole. Step
    tables are resolved from role triples into Step records once, at
    construction.
    """

    def __init__(
        self,
        layout: Sequence[Tuple[NodeRole, float, float]] = NODE_LAYOUT,
        step_tables: Optional[Dict[Scenario, Sequence[Tuple[NodeRole, NodeRole, Direction]]]] = None,
    ):
        self._nodes: Tuple[Node, ...] = tuple(
            Node(id=index, role=role, label=role.value, x=float(x), y=float(y))
            for index, (role, x, y) in enumerate(layout)
        )
        self._ids_by_role: Dict[NodeRole, int] = {node.role: node.id for node in self._nodes}

        if step_tables is None:
            step_tables = {Scenario.SUCCESS: SUCCESS_STEPS, Scenario.FAILURE: FAILURE_STEPS}

        self._steps: Dict[Scenario, Tuple[Step, ...]] = {
            scenario: tuple(
                Step(
                    source=self.node_id(source),
                    target=self.node_id(target),
                    direction=direction,
                )
                for source, target, direction in table
            )
            for scenario, table in step_tables.items()
        }

    @property
    def nodes(self) -> Tuple[Node, ...]:
        """All nodes in id order."""
        return self._nodes

    def node_at(self, node_id: int) -> Node:
        """Get a node by id. Negative ids are rejected, never wrapped."""
        if not isinstance(node_id, int) or not 0 <= node_id < len(self._nodes):
            raise IndexOutOfRange("node", node_id, len(self._nodes))
        return self._nodes[node_id]

    def node_id(self, role: NodeRole) -> int:
        """Resolve a role to its node id."""
        try:
            return self._ids_by_role[role]
        except KeyError:
            raise IndexOutOfRange("node", -1, len(self._nodes)) from None

    def node_for(self, role: NodeRole) -> Node:
        """Resolve a role to its node."""
        return self._nodes[self.node_id(role)]

    def steps_for(self, scenario: Union[Scenario, str]) -> Tuple[Step, ...]:
        """Ordered step sequence of a scenario."""
        scenario = Scenario.parse(scenario)
        try:
            return self._steps[scenario]
        except KeyError:
            raise InvalidScenario(scenario) from None

    def step_at(self, scenario: Union[Scenario, str], index: int) -> Optional[Step]:
        """Step at index, or None when no step exists there (e.g. the -1 sentinel)."""
        steps = self.steps_for(scenario)
        if 0 <= index < len(steps):
            return steps[index]
        return None

    def step_count(self, scenario: Union[Scenario, str]) -> int:
        return len(self.steps_for(scenario))

    def last_index(self, scenario: Union[Scenario, str]) -> int:
        return self.step_count(scenario) - 1

    def validate(self) -> List[str]:
        """Validate step tables and return any issues found."""
        issues = []
        for scenario, steps in self._steps.items():
            if not steps:
                issues.append(f"Scenario '{scenario.value}' has no steps")
            for index, step in enumerate(steps):
                for end in (step.source, step.target):
                    if not 0 <= end < len(self._nodes):
                        issues.append(
                            f"Step {index} of '{scenario.value}' references unknown node {end}"
                        )
        return issues

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "nodes": [
                {"id": node.id, "label": node.label, "x": node.x, "y": node.y}
                for node in self._nodes
            ],
            "steps": {
                scenario.value: [
                    {"from": step.source, "to": step.target, "direction": step.direction.value}
                    for step in steps
                ]
                for scenario, steps in self._steps.items()
            },
        }


DEFAULT_TOPOLOGY = Topology()
