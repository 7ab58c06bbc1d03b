"""PlaybackState - snapshot of a playback run."""

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

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from .topology import Scenario

NOT_STARTED = -1

SUCCESS_STATUS = "Access granted. Data retrieved from backend and returned to client."
FAILURE_STATUS = "Access denied. Authentication failed."


class PlaybackPhase(Enum):
    """Lifecycle phase of a playback run."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    CANCELLED = "cancelled"


def terminal_status(scenario: Scenario) -> str:
    """Status text emitted on the last tick of a run."""
    return SUCCESS_STATUS if scenario is Scenario.SUCCESS else FAILURE_STATUS


@dataclass(frozen=True)
class PlaybackState:
    """
    Immutable snapshot of the playback controller.

    current_step_index ranges over [-1, last index]; -1 means the run has not
    shown any step yet. arrow_progress is 0.0 right after a step change and
    1.0 once the arrow reveal delay has elapsed.
    """

    scenario: Scenario = Scenario.SUCCESS
    current_step_index: int = NOT_STARTED
    is_animating: bool = False
    phase: PlaybackPhase = PlaybackPhase.IDLE
    arrow_progress: float = 0.0
    status: Optional[str] = None
    run_id: int = 0

    @property
    def has_started(self) -> bool:
        return self.current_step_index != NOT_STARTED

    @property
    def is_done(self) -> bool:
        return self.phase is PlaybackPhase.DONE

    def evolve(self, **changes: Any) -> "PlaybackState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scenario": self.scenario.value,
            "current_step_index": self.current_step_index,
            "is_animating": self.is_animating,
            "phase": self.phase.value,
            "arrow_progress": self.arrow_progress,
            "status": self.status,
            "run_id": self.run_id,
        }
