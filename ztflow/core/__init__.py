"""
Core types: the fixed topology and immutable playback state.
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

from .playback_state import (
    FAILURE_STATUS,
    NOT_STARTED,
    SUCCESS_STATUS,
    PlaybackPhase,
    PlaybackState,
    terminal_status,
)
from .topology import (
    DEFAULT_TOPOLOGY,
    FAILURE_STEPS,
    NODE_LAYOUT,
    SUCCESS_STEPS,
    Direction,
    Node,
    NodeRole,
    Scenario,
    Step,
    Topology,
)

__all__ = [
    "DEFAULT_TOPOLOGY",
    "FAILURE_STEPS",
    "NODE_LAYOUT",
    "SUCCESS_STEPS",
    "Direction",
    "Node",
    "NodeRole",
    "Scenario",
    "Step",
    "Topology",
    "FAILURE_STATUS",
    "NOT_STARTED",
    "SUCCESS_STATUS",
    "PlaybackPhase",
    "PlaybackState",
    "terminal_status",
]
