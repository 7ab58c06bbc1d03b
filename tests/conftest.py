"""
Shared fixtures for ztflow tests.
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

from ztflow.config.flow_config import ConfigurationManager, FlowConfig
from ztflow.engine.playback_engine import PlaybackController
from ztflow.events.playback_events import InMemoryEventPublisher
from ztflow.logging import shutdown_ztflow_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    shutdown_ztflow_logging()


@pytest.fixture
def fast_config() -> FlowConfig:
    """20ms steps with a 5ms arrow reveal."""
    return ConfigurationManager.get_fast_config()


@pytest.fixture
def publisher() -> InMemoryEventPublisher:
    return InMemoryEventPublisher()


@pytest.fixture
def controller(fast_config, publisher) -> PlaybackController:
    return PlaybackController(fast_config, event_publisher=publisher)
