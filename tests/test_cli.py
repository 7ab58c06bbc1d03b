#!/usr/bin/env python3
"""
Tests for the ztflow command-line interface.
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

import json

import pytest

from ztflow.cli import build_config, frame_state, main
from ztflow.config.flow_config import FlowConfig
from ztflow.core.playback_state import SUCCESS_STATUS, PlaybackPhase
from ztflow.core.topology import Scenario
from ztflow.exceptions import IndexOutOfRange

QUIET = ["--log-level", "ERROR"]


class TestBuildConfig:
    def test_defaults(self):
        config = build_config()
        assert config.playback.step_interval_ms == FlowConfig().playback.step_interval_ms

    def test_speed(self):
        config = build_config(speed=4)

        assert config.playback.step_interval_ms == 250
        assert config.playback.arrow_reveal_delay_ms == 12

    def test_extreme_speed_keeps_reveal_inside_step(self):
        config = build_config(speed=5000)

        assert config.playback.step_interval_ms == 1
        assert config.playback.arrow_reveal_delay_ms == 0

    def test_invalid_speed(self):
        with pytest.raises(ValueError):
            build_config(speed=0)

    def test_log_overrides(self):
        config = build_config(log_level="debug", log_format="text")

        assert config.logging.level == "DEBUG"
        assert config.logging.format == "text"


class TestFrameState:
    def test_running_step(self):
        state = frame_state(Scenario.SUCCESS, 4, 0.25)

        assert state.phase is PlaybackPhase.RUNNING
        assert state.arrow_progress == 0.25
        assert state.status is None

    def test_last_step_is_done(self):
        state = frame_state(Scenario.SUCCESS, 15)

        assert state.is_done
        assert state.status == SUCCESS_STATUS

    def test_not_started(self):
        assert frame_state(Scenario.FAILURE, -1).phase is PlaybackPhase.IDLE

    def test_out_of_range(self):
        with pytest.raises(IndexOutOfRange):
            frame_state(Scenario.FAILURE, 8)


class TestMain:
    """Test CLI commands end to end."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_frame_json(self, capsys):
        assert main(QUIET + ["frame", "failure", "5", "--format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["state"]["scenario"] == "failure"
        assert data["marker"] == {"x": 520.0, "y": 320.0}

    def test_frame_ascii(self, capsys):
        assert main(QUIET + ["frame", "success", "13"]) == 0
        assert "success: step 13/15" in capsys.readouterr().out

    def test_frame_out_of_range(self, capsys):
        assert main(QUIET + ["frame", "failure", "9"]) == 2
        assert "out of range" in capsys.readouterr().err

    def test_frame_bad_progress(self, capsys):
        assert main(QUIET + ["frame", "success", "0", "--progress", "2"]) == 2

    def test_invalid_scenario_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main(["frame", "sideways", "0"])

    def test_topology(self, capsys):
        assert main(QUIET + ["topology"]) == 0

        out = capsys.readouterr().out
        assert "Nodes" in out
        assert "Success steps" in out
        assert "Failure steps" in out

    def test_init_config(self, tmp_path, capsys):
        path = tmp_path / "ztflow.yaml"

        assert main(QUIET + ["init-config", str(path)]) == 0
        assert FlowConfig.from_file(path) == FlowConfig()

    def test_invalid_speed(self, capsys):
        assert main(["--speed", "0", "topology"]) == 2

    def test_play(self, capsys):
        assert main(QUIET + ["--speed", "100", "play", "failure"]) == 0

    def test_login_wrong_password(self, capsys):
        assert main(QUIET + ["--speed", "100", "login", "admin", "nope"]) == 1
        assert "Access denied. Authentication failed." in capsys.readouterr().out

    def test_login_with_mfa(self, capsys):
        code = main(QUIET + ["--speed", "100", "login", "admin", "password", "--mfa", "123456"])

        assert code == 0
        assert SUCCESS_STATUS in capsys.readouterr().out

    def test_login_without_mfa(self, capsys):
        assert main(QUIET + ["login", "admin", "password"]) == 0
        assert "MFA required" in capsys.readouterr().out
