"""
Playback events and the in-memory publisher that fans them out.

The playback controller publishes one event per state transition. Renderers,
the session controller and tests subscribe to them instead of polling.
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
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from ..core.playback_state import PlaybackState

logger = logging.getLogger(__name__)


class PlaybackEventType(Enum):
    """Types of playback events that can be published."""

    RUN_STARTED = "run_started"
    STEP_ADVANCED = "step_advanced"
    ARROW_REVEALED = "arrow_revealed"
    RUN_COMPLETED = "run_completed"
    RUN_CANCELLED = "run_cancelled"


@dataclass
class PlaybackEvent:
    """A playback state transition together with the resulting state."""

    event_type: PlaybackEventType
    state: PlaybackState
    timestamp: datetime = field(default_factory=datetime.utcnow)

    @property
    def run_id(self) -> int:
        return self.state.run_id

    @property
    def step_index(self) -> int:
        return self.state.current_step_index

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            **self.state.to_dict(),
        }


EventHandler = Callable[[PlaybackEvent], Any]


class InMemoryEventPublisher:
    """In-memory event publisher with optional recording of published events."""

    def __init__(self, record: bool = True, max_recorded: int = 1000):
        self._event_handlers: Dict[Optional[PlaybackEventType], List[EventHandler]] = {}
        self._published_events: List[PlaybackEvent] = []
        self._pending_tasks: Set[asyncio.Task] = set()
        self.record = record
        self.max_recorded = max_recorded

    def subscribe(
        self, handler: EventHandler, event_type: Optional[PlaybackEventType] = None
    ) -> Callable[[], None]:
        """
        Subscribe to events of one type, or to all events when event_type is None.

        Returns:
            A callable that removes the subscription
        """
        self._event_handlers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._event_handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: PlaybackEvent) -> None:
        """Publish an event to matching handlers. Handler errors are logged, not raised."""
        if self.record:
            self._published_events.append(event)
            if len(self._published_events) > self.max_recorded:
                del self._published_events[0]

        logger.debug(
            f"Published playback event: {event.event_type.value}",
            extra={"run_id": event.run_id, "step_index": event.step_index},
        )

        handlers = self._event_handlers.get(event.event_type, []) + self._event_handlers.get(
            None, []
        )
        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    task = asyncio.get_running_loop().create_task(handler(event))
                    self._pending_tasks.add(task)
                    task.add_done_callback(self._handler_done)
                else:
                    handler(event)
            except Exception as e:
                logger.error(f"Error in playback event handler: {e}", exc_info=True)

    def _handler_done(self, task: asyncio.Task) -> None:
        self._pending_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Error in playback event handler: {error}",
                exc_info=(type(error), error, error.__traceback__),
            )

    def get_published_events(
        self, event_type: Optional[PlaybackEventType] = None
    ) -> List[PlaybackEvent]:
        """Get recorded events, optionally filtered by type."""
        if event_type is None:
            return self._published_events.copy()
        return [e for e in self._published_events if e.event_type is event_type]

    def clear_events(self) -> None:
        """Clear recorded events."""
        self._published_events.clear()
