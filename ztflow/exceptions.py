"""
Exception hierarchy for ztflow.
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


class ZtFlowError(Exception):
    """Base exception for all ztflow errors."""


class IndexOutOfRange(ZtFlowError, IndexError):
    """A node or step index outside its valid bounds."""

    def __init__(self, kind: str, index: int, size: int):
        self.kind = kind
        self.index = index
        self.size = size
        super().__init__(f"{kind} index {index} out of range (valid: 0..{size - 1})")


class InvalidScenario(ZtFlowError, ValueError):
    """A scenario value outside {success, failure}."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid scenario: {value!r} (expected 'success' or 'failure')")


class PlaybackError(ZtFlowError, RuntimeError):
    """Playback could not be started or driven."""


class SessionStateError(ZtFlowError):
    """A session operation was called in the wrong state (e.g. MFA without login)."""


class InputLockedError(SessionStateError):
    """Session input was submitted while a playback run is animating."""
