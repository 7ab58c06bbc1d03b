"""
Single-slot cancelable timer on the asyncio event loop.
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
from typing import Any, Callable, Optional

from ..exceptions import PlaybackError

logger = logging.getLogger(__name__)


class CancelableTimeline:
    """
    Holds at most one pending callback.

    Arming the timeline while a callback is pending cancels the pending one
    first, so a timeline can never fire a callback that was superseded.
    """

    def __init__(self, name: str, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.name = name
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def generation(self) -> int:
        """Incremented on every arm and cancel."""
        return self._generation

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise PlaybackError(
                f"Timeline '{self.name}' needs a running asyncio event loop"
            ) from None

    def arm(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule callback after delay seconds, replacing any pending callback."""
        loop = self._get_loop()
        self.cancel()
        generation = self._generation

        def fire() -> None:
            if generation != self._generation:
                return
            self._handle = None
            callback(*args)

        self._handle = loop.call_later(max(delay, 0.0), fire)

    def cancel(self) -> bool:
        """Cancel the pending callback. Returns True if one was pending."""
        self._generation += 1
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug("Timeline callback cancelled", extra={"timeline": self.name})
        return True
