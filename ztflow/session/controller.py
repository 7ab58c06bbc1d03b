"""
Session controller - the login form glue around playback.

Runs the credential check, the MFA gate and scenario selection, then hands
the chosen scenario to the PlaybackController. The credential check is a
plain equality test against fixed demo values; nothing here is real
authentication.
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

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..config.flow_config import CredentialConfig, FlowConfig
from ..core.topology import Scenario
from ..engine.playback_engine import PlaybackController
from ..events.playback_events import PlaybackEvent, PlaybackEventType
from ..exceptions import InputLockedError, SessionStateError
from ..utils.helpers import generate_correlation_id, mask_secret

logger = logging.getLogger(__name__)

STATUS_MFA_REQUIRED = "MFA required"
STATUS_LOGIN_FAILED = "Login failed"
STATUS_LOGIN_SUCCESSFUL = "Login successful"
STATUS_MFA_FAILED = "MFA verification failed"


class AuthOutcome(Enum):
    GRANTED = "granted"
    DENIED = "denied"


class CredentialVerifier:
    """Equality check against the configured demo credentials."""

    def __init__(self, credentials: Optional[CredentialConfig] = None):
        self._credentials = credentials or CredentialConfig()

    def verify_password(self, username: str, password: str) -> bool:
        return username == self._credentials.username and password == self._credentials.password

    def verify_mfa(self, code: str) -> bool:
        return code == self._credentials.mfa_code


class SessionController:
    """
    Login, MFA and playback orchestration for one viewer.

    Input is refused with InputLockedError while a playback run is
    animating, mirroring the disabled form controls of the diagram UI.
    """

    def __init__(
        self,
        playback: Optional[PlaybackController] = None,
        config: Optional[FlowConfig] = None,
        verifier: Optional[CredentialVerifier] = None,
    ):
        self.config = config or (playback.config if playback else FlowConfig())
        self.playback = playback or PlaybackController(self.config)
        self.verifier = verifier or CredentialVerifier(self.config.credentials)

        self.session_id = generate_correlation_id()
        self.started_at = datetime.now()
        self.scenario = Scenario.SUCCESS
        self.mfa_required = False
        self.status = ""
        self.attempts = 0

        self.playback.subscribe(self._on_run_completed, PlaybackEventType.RUN_COMPLETED)

    @property
    def controls_enabled(self) -> bool:
        return not self.playback.is_animating

    @property
    def status_is_failure(self) -> bool:
        lowered = self.status.lower()
        return "failed" in lowered or "denied" in lowered

    @staticmethod
    def select_scenario(outcome: AuthOutcome) -> Scenario:
        """Map an authentication outcome to the scenario that depicts it."""
        if outcome is AuthOutcome.GRANTED:
            return Scenario.SUCCESS
        return Scenario.FAILURE

    def begin_playback(self, scenario: Scenario) -> int:
        """Start playback of a scenario. Returns the run id."""
        self.scenario = scenario
        return self.playback.start(scenario)

    def login(self, username: str, password: str) -> AuthOutcome:
        """
        Check username and password.

        Correct credentials open the MFA gate without starting playback.
        Wrong credentials start the failure playback immediately.
        """
        self._ensure_unlocked()
        self.attempts += 1

        if self.verifier.verify_password(username, password):
            self.mfa_required = True
            self.scenario = self.select_scenario(AuthOutcome.GRANTED)
            self._set_status(STATUS_MFA_REQUIRED)
            logger.info(
                "Credentials accepted, MFA required",
                extra={
                    "session_id": self.session_id,
                    "username": mask_secret(username, visible=1),
                },
            )
            return AuthOutcome.GRANTED

        self.mfa_required = False
        self._set_status(STATUS_LOGIN_FAILED)
        logger.info(
            "Credentials rejected",
            extra={
                "session_id": self.session_id,
                "username": mask_secret(username, visible=1),
                "attempt": self.attempts,
            },
        )
        self.begin_playback(self.select_scenario(AuthOutcome.DENIED))
        return AuthOutcome.DENIED

    def submit_mfa(self, code: str) -> AuthOutcome:
        """
        Check the MFA code and start the matching playback.

        A wrong code switches the scenario to failure and starts a fresh
        failure run from -1.
        """
        self._ensure_unlocked()
        if not (self.mfa_required and self.scenario is Scenario.SUCCESS):
            raise SessionStateError("MFA submitted before a successful login")

        if self.verifier.verify_mfa(code):
            self._set_status(STATUS_LOGIN_SUCCESSFUL)
            logger.info("MFA accepted", extra={"session_id": self.session_id})
            self.begin_playback(self.select_scenario(AuthOutcome.GRANTED))
            return AuthOutcome.GRANTED

        self.mfa_required = False
        self._set_status(STATUS_MFA_FAILED)
        logger.info(
            "MFA rejected",
            extra={"session_id": self.session_id, "mfa_code": mask_secret(code)},
        )
        self.begin_playback(self.select_scenario(AuthOutcome.DENIED))
        return AuthOutcome.DENIED

    async def wait_until_done(self, timeout: Optional[float] = None) -> bool:
        return await self.playback.wait_until_done(timeout)

    def get_status_summary(self) -> Dict[str, Any]:
        """Get a summary of session status."""
        state = self.playback.state
        return {
            "session_id": self.session_id,
            "status": self.status,
            "status_is_failure": self.status_is_failure,
            "scenario": self.scenario.value,
            "mfa_required": self.mfa_required,
            "controls_enabled": self.controls_enabled,
            "attempts": self.attempts,
            "playback": state.to_dict(),
        }

    def _ensure_unlocked(self) -> None:
        if self.playback.is_animating:
            raise InputLockedError("Input is disabled while the flow is animating")

    def _set_status(self, status: str) -> None:
        self.status = status

    def _on_run_completed(self, event: PlaybackEvent) -> None:
        if event.state.status:
            self._set_status(event.state.status)
