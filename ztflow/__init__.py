#!/usr/bin/env python3
"""
ztflow - Zero Trust Flow Playback Engine

Deterministic, cancelable playback of the request/response hops of a zero
trust access flow across seven fixed components (Client, Front-end,
Firewall, PDP, IdP, PEP, Back-end).

Key Features:
- Fixed topology with a 16-step success and an 8-step failure scenario
- Single-threaded asyncio timeline, cancelled before every new run
- Precomputed highlight policy per (scenario, step index)
- Arrow and data marker geometry, rendered to ASCII, SVG, JSON or rich
- Login and MFA session glue that selects the scenario to play
- Pydantic configuration and JSON logging

Usage:
    import asyncio
    from ztflow import PlaybackController, Scenario

    async def main():
        controller = PlaybackController()
        final_state = await controller.run(Scenario.SUCCESS)
        print(final_state.status)

    asyncio.run(main())

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

__version__ = "1.0.0"
__author__ = "Firefly Software Solutions Inc"
__license__ = "Apache 2.0"

# Configuration
from .config.flow_config import (
    ConfigurationManager,
    CredentialConfig,
    FlowConfig,
    LayoutConfig,
    LoggingConfig,
    PlaybackConfig,
)

# Core types
from .core.playback_state import (
    FAILURE_STATUS,
    NOT_STARTED,
    SUCCESS_STATUS,
    PlaybackPhase,
    PlaybackState,
)
from .core.topology import DEFAULT_TOPOLOGY, Direction, Node, NodeRole, Scenario, Step, Topology

# Engine
from .engine.playback_engine import PlaybackController
from .engine.timeline import CancelableTimeline

# Events
from .events.playback_events import InMemoryEventPublisher, PlaybackEvent, PlaybackEventType

# Errors
from .exceptions import (
    IndexOutOfRange,
    InputLockedError,
    InvalidScenario,
    PlaybackError,
    SessionStateError,
    ZtFlowError,
)

# Session glue
from .session.controller import AuthOutcome, CredentialVerifier, SessionController

# Visualization
from .visualization.geometry import ArrowGeometry, Point, arrow_geometry, marker_position
from .visualization.highlight import HighlightColor, HighlightResult, HighlightTable, highlight
from .visualization.renderer import FlowFrame, FlowRenderer, OutputFormat

__all__ = [
    "__version__",
    # Configuration
    "FlowConfig",
    "PlaybackConfig",
    "LayoutConfig",
    "CredentialConfig",
    "LoggingConfig",
    "ConfigurationManager",
    # Core
    "Scenario",
    "Direction",
    "NodeRole",
    "Node",
    "Step",
    "Topology",
    "DEFAULT_TOPOLOGY",
    "PlaybackState",
    "PlaybackPhase",
    "NOT_STARTED",
    "SUCCESS_STATUS",
    "FAILURE_STATUS",
    # Engine
    "PlaybackController",
    "CancelableTimeline",
    # Events
    "InMemoryEventPublisher",
    "PlaybackEvent",
    "PlaybackEventType",
    # Errors
    "ZtFlowError",
    "IndexOutOfRange",
    "InvalidScenario",
    "PlaybackError",
    "SessionStateError",
    "InputLockedError",
    # Session
    "SessionController",
    "CredentialVerifier",
    "AuthOutcome",
    # Visualization
    "Point",
    "ArrowGeometry",
    "arrow_geometry",
    "marker_position",
    "HighlightColor",
    "HighlightResult",
    "HighlightTable",
    "highlight",
    "FlowFrame",
    "FlowRenderer",
    "OutputFormat",
]
