"""
Playback controller - drives a scenario's step timeline.

A run advances an integer step cursor from -1 through the scenario's last
index, one tick per step interval, on a single cancelable timeline that is
re-armed after each tick. A second timeline carries the short arrow reveal
delay that follows every step change.

Example:
    controller = PlaybackController()
    await controller.run(Scenario.SUCCESS)
    print(controller.state.status)
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

import asyncio
import logging
from typing import Callable, Optional, Union

from ..config.flow_config import FlowConfig
from ..core.playback_state import (
    NOT_STARTED,
    PlaybackPhase,
    PlaybackState,
    terminal_status,
)
from ..core.topology import DEFAULT_TOPOLOGY, Scenario, Topology
from ..events.playback_events import (
    EventHandler,
    InMemoryEventPublisher,
    PlaybackEvent,
    PlaybackEventType,
)
from ..exceptions import PlaybackError
from ..utils.helpers import format_duration_ms
from .timeline import CancelableTimeline

logger = logging.getLogger(__name__)


class PlaybackController:
    """
    Timed state machine over a scenario's steps.

    States are IDLE (index -1), RUNNING (index i) and DONE, plus CANCELLED
    for a run that was stopped or superseded. The state is only mutated by
    start(), cancel() and the timeline callbacks.
    """

    def __init__(
        self,
        config: Optional[FlowConfig] = None,
        topology: Topology = DEFAULT_TOPOLOGY,
        event_publisher: Optional[InMemoryEventPublisher] = None,
    ):
        self.config = config or FlowConfig()
        self.topology = topology
        self.event_publisher = event_publisher or InMemoryEventPublisher()

        self._state = PlaybackState()
        self._step_timeline = CancelableTimeline("steps")
        self._reveal_timeline = CancelableTimeline("arrow-reveal")
        self._run_future: Optional[asyncio.Future] = None
        self._run_counter = 0
        self._run_started_at = 0.0

    @property
    def state(self) -> PlaybackState:
        """Current immutable state snapshot."""
        return self._state

    @property
    def is_animating(self) -> bool:
        return self._state.is_animating

    @property
    def current_step_index(self) -> int:
        return self._state.current_step_index

    def subscribe(
        self, handler: EventHandler, event_type: Optional[PlaybackEventType] = None
    ) -> Callable[[], None]:
        """Subscribe to playback events. Returns an unsubscribe callable."""
        return self.event_publisher.subscribe(handler, event_type)

    def start(self, scenario: Union[Scenario, str]) -> int:
        """
        Start a new run of the scenario, cancelling any active run first.

        Must be called with a running asyncio event loop.

        Returns:
            The id of the new run
        """
        scenario = Scenario.parse(scenario)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise PlaybackError("Playback requires a running asyncio event loop") from None

        self.cancel()

        self._run_counter += 1
        self._run_future = loop.create_future()
        self._run_started_at = loop.time()
        self._state = PlaybackState(
            scenario=scenario,
            current_step_index=NOT_STARTED,
            is_animating=True,
            phase=PlaybackPhase.IDLE,
            arrow_progress=0.0,
            status=None,
            run_id=self._run_counter,
        )

        logger.info(
            f"Playback run started: {scenario.value}",
            extra={
                "run_id": self._run_counter,
                "scenario": scenario.value,
                "step_count": self.topology.step_count(scenario),
            },
        )
        run_id = self._run_counter
        self._publish(PlaybackEventType.RUN_STARTED)
        if self._state.run_id != run_id:
            return self._state.run_id

        self._step_timeline.arm(0.0, self._tick, 0)
        return run_id

    def start_success_playback(self) -> int:
        return self.start(Scenario.SUCCESS)

    def start_failure_playback(self) -> int:
        return self.start(Scenario.FAILURE)

    def cancel(self) -> bool:
        """
        Cancel the active run, including its pending arrow reveal.

        Returns:
            True if an animating run was cancelled
        """
        self._step_timeline.cancel()
        self._reveal_timeline.cancel()

        if not self._state.is_animating:
            return False

        future = self._run_future
        self._state = self._state.evolve(is_animating=False, phase=PlaybackPhase.CANCELLED)
        logger.info(
            "Playback run cancelled",
            extra={
                "run_id": self._state.run_id,
                "scenario": self._state.scenario.value,
                "step_index": self._state.current_step_index,
            },
        )
        self._publish(PlaybackEventType.RUN_CANCELLED)
        self._resolve_run(future, False)
        return True

    async def wait_until_done(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the active run to finish.

        Returns:
            True if the run completed, False if it was cancelled or none was started
        """
        if self._run_future is None:
            return False
        return await asyncio.wait_for(asyncio.shield(self._run_future), timeout)

    async def run(self, scenario: Union[Scenario, str], timeout: Optional[float] = None) -> PlaybackState:
        """Start a run and wait for it to finish. Returns the final state."""
        self.start(scenario)
        await self.wait_until_done(timeout)
        return self._state

    def _tick(self, index: int) -> None:
        scenario = self._state.scenario
        run_id = self._state.run_id
        future = self._run_future
        last_index = self.topology.last_index(scenario)

        self._state = self._state.evolve(
            current_step_index=index,
            phase=PlaybackPhase.RUNNING,
            arrow_progress=0.0,
        )
        self._reveal_timeline.arm(self.config.playback.arrow_reveal_delay, self._reveal_arrow)

        if index == last_index:
            self._state = self._state.evolve(
                is_animating=False,
                phase=PlaybackPhase.DONE,
                status=terminal_status(scenario),
            )

        logger.debug(
            "Playback step advanced",
            extra={"run_id": run_id, "scenario": scenario.value, "step_index": index},
        )
        self._publish(PlaybackEventType.STEP_ADVANCED)
        # A handler may have started a new run
        if self._state.run_id != run_id:
            if index == last_index:
                self._resolve_run(future, True)
            return

        if index == last_index:
            elapsed_ms = int((asyncio.get_running_loop().time() - self._run_started_at) * 1000)
            logger.info(
                self._state.status,
                extra={
                    "run_id": run_id,
                    "scenario": scenario.value,
                    "duration": format_duration_ms(elapsed_ms),
                },
            )
            self._publish(PlaybackEventType.RUN_COMPLETED)
            self._resolve_run(future, True)
        else:
            self._step_timeline.arm(self.config.playback.step_interval, self._tick, index + 1)

    def _reveal_arrow(self) -> None:
        self._state = self._state.evolve(arrow_progress=1.0)
        self._publish(PlaybackEventType.ARROW_REVEALED)

    def _publish(self, event_type: PlaybackEventType) -> None:
        self.event_publisher.publish(PlaybackEvent(event_type=event_type, state=self._state))

    @staticmethod
    def _resolve_run(future: Optional[asyncio.Future], completed: bool) -> None:
        if future is not None and not future.done():
            future.set_result(completed)
