#!/usr/bin/env python3
"""
Unit tests for the fixed topology and playback state.
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

import pytest

from ztflow.core.playback_state import (
    FAILURE_STATUS,
    NOT_STARTED,
    SUCCESS_STATUS,
    PlaybackPhase,
    PlaybackState,
    terminal_status,
)
from ztflow.core.topology import DEFAULT_TOPOLOGY, Direction, NodeRole, Scenario, Topology
from ztflow.exceptions import IndexOutOfRange, InvalidScenario


class TestScenario:
    """Test scenario parsing."""

    def test_parse_values(self):
        assert Scenario.parse("success") is Scenario.SUCCESS
        assert Scenario.parse(" FAILURE ") is Scenario.FAILURE
        assert Scenario.parse(Scenario.SUCCESS) is Scenario.SUCCESS

    def test_parse_rejects_unknown(self):
        with pytest.raises(InvalidScenario):
            Scenario.parse("maybe")

        with pytest.raises(InvalidScenario):
            Scenario.parse(1)

    def test_invalid_scenario_is_value_error(self):
        with pytest.raises(ValueError):
            Scenario.parse("")


class TestNodes:
    """Test the node table."""

    def test_seven_nodes_in_layout_order(self):
        labels = [node.label for node in DEFAULT_TOPOLOGY.nodes]
        assert labels == ["Client", "Front-end", "Firewall", "PDP", "IdP", "PEP", "Back-end"]

        ids = [node.id for node in DEFAULT_TOPOLOGY.nodes]
        assert ids == list(range(7))

    def test_positions(self):
        idp = DEFAULT_TOPOLOGY.node_for(NodeRole.IDP)
        assert (idp.x, idp.y) == (500.0, 300.0)

        backend = DEFAULT_TOPOLOGY.node_at(6)
        assert backend.role is NodeRole.BACK_END
        assert (backend.x, backend.y) == (800.0, 150.0)

    def test_node_at_out_of_range(self):
        with pytest.raises(IndexOutOfRange):
            DEFAULT_TOPOLOGY.node_at(7)

    def test_negative_node_id_is_not_wrapped(self):
        with pytest.raises(IndexOutOfRange) as exc_info:
            DEFAULT_TOPOLOGY.node_at(-1)

        assert exc_info.value.index == -1
        assert exc_info.value.size == 7

    def test_node_id_by_role(self):
        assert DEFAULT_TOPOLOGY.node_id(NodeRole.CLIENT) == 0
        assert DEFAULT_TOPOLOGY.node_id(NodeRole.FIREWALL) == 2
        assert DEFAULT_TOPOLOGY.node_id(NodeRole.PEP) == 5


class TestSteps:
    """Test the scenario step tables."""

    def test_step_counts(self):
        assert DEFAULT_TOPOLOGY.step_count(Scenario.SUCCESS) == 16
        assert DEFAULT_TOPOLOGY.step_count(Scenario.FAILURE) == 8
        assert DEFAULT_TOPOLOGY.last_index("success") == 15
        assert DEFAULT_TOPOLOGY.last_index("failure") == 7

    def test_success_route(self):
        route = [(s.source, s.target) for s in DEFAULT_TOPOLOGY.steps_for(Scenario.SUCCESS)]
        assert route == [
            (0, 1), (1, 2), (2, 3), (3, 4), (4, 3), (3, 5), (5, 2), (2, 6),
            (6, 2), (2, 1), (1, 0), (0, 1), (1, 2), (2, 6), (6, 0), (6, 0),
        ]

    def test_failure_route(self):
        route = [(s.source, s.target) for s in DEFAULT_TOPOLOGY.steps_for(Scenario.FAILURE)]
        assert route == [(0, 1), (1, 2), (2, 3), (3, 4), (4, 3), (3, 2), (2, 1), (1, 0)]

    def test_directions(self):
        steps = DEFAULT_TOPOLOGY.steps_for(Scenario.SUCCESS)
        assert steps[3].direction is Direction.DOWN
        assert steps[4].direction is Direction.UP
        assert steps[14].direction is Direction.LEFT

    def test_step_at_outside_range_is_none(self):
        assert DEFAULT_TOPOLOGY.step_at(Scenario.SUCCESS, NOT_STARTED) is None
        assert DEFAULT_TOPOLOGY.step_at(Scenario.FAILURE, 8) is None
        assert DEFAULT_TOPOLOGY.step_at(Scenario.FAILURE, 7) is not None

    def test_all_steps_reference_known_nodes(self):
        assert DEFAULT_TOPOLOGY.validate() == []

    def test_to_dict(self):
        data = DEFAULT_TOPOLOGY.to_dict()

        assert len(data["nodes"]) == 7
        assert len(data["steps"]["success"]) == 16
        assert data["steps"]["failure"][3] == {"from": 3, "to": 4, "direction": "down"}

    def test_empty_scenario_reported(self):
        topology = Topology(step_tables={Scenario.SUCCESS: (), Scenario.FAILURE: ()})

        issues = topology.validate()
        assert len(issues) == 2


class TestPlaybackState:
    """Test the immutable playback state."""

    def test_defaults(self):
        state = PlaybackState()

        assert state.current_step_index == NOT_STARTED
        assert state.is_animating is False
        assert state.phase is PlaybackPhase.IDLE
        assert state.has_started is False
        assert state.is_done is False

    def test_evolve_returns_copy(self):
        state = PlaybackState()
        advanced = state.evolve(current_step_index=3, phase=PlaybackPhase.RUNNING)

        assert state.current_step_index == NOT_STARTED
        assert advanced.current_step_index == 3
        assert advanced.has_started is True

    def test_state_is_frozen(self):
        state = PlaybackState()
        with pytest.raises(AttributeError):
            state.current_step_index = 2

    def test_terminal_status(self):
        assert terminal_status(Scenario.SUCCESS) == SUCCESS_STATUS
        assert terminal_status(Scenario.FAILURE) == FAILURE_STATUS
        assert FAILURE_STATUS == "Access denied. Authentication failed."

    def test_to_dict(self):
        data = PlaybackState(scenario=Scenario.FAILURE, run_id=4).to_dict()

        assert data["scenario"] == "failure"
        assert data["phase"] == "idle"
        assert data["run_id"] == 4
