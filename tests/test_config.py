#!/usr/bin/env python3
"""
Unit tests for configuration classes.
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
import json
import yaml
from unittest.mock import patch

from ztflow.config.flow_config import (
    PlaybackConfig,
    LayoutConfig,
    CredentialConfig,
    LoggingConfig,
    FlowConfig,
    ConfigurationManager,
)


class TestPlaybackConfig:
    """Test PlaybackConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = PlaybackConfig()

        assert config.step_interval_ms == 1000
        assert config.arrow_reveal_delay_ms == 50
        assert config.step_interval == 1.0
        assert config.arrow_reveal_delay == 0.05

    def test_validation(self):
        """Test configuration validation."""
        PlaybackConfig(step_interval_ms=100, arrow_reveal_delay_ms=99)

        with pytest.raises(ValueError, match="arrow_reveal_delay_ms must be less than"):
            PlaybackConfig(step_interval_ms=100, arrow_reveal_delay_ms=100)

        with pytest.raises(ValueError):
            PlaybackConfig(step_interval_ms=0)

        with pytest.raises(ValueError):
            PlaybackConfig(arrow_reveal_delay_ms=-1)


class TestLayoutConfig:
    def test_default_values(self):
        config = LayoutConfig()

        assert config.marker_offset == 20.0
        assert config.icon_size == 60
        assert config.marker_size == 20
        assert (config.canvas_width, config.canvas_height) == (900, 350)


class TestCredentialConfig:
    def test_default_values(self):
        config = CredentialConfig()

        assert config.username == "admin"
        assert config.password == "password"
        assert config.mfa_code == "123456"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            CredentialConfig(username="")


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_values(self):
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.format == "json"
        assert config.output_file is None

    def test_log_levels(self):
        """Test log level validation."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            assert LoggingConfig(level=level).level == level

        assert LoggingConfig(level="debug").level == "DEBUG"

        with pytest.raises(ValueError, match="Log level must be one of"):
            LoggingConfig(level="INVALID")

    def test_log_formats(self):
        assert LoggingConfig(format="TEXT").format == "text"

        with pytest.raises(ValueError, match="Log format must be one of"):
            LoggingConfig(format="xml")


class TestFlowConfig:
    """Test FlowConfig class."""

    def test_default_values(self):
        config = FlowConfig()

        assert isinstance(config.playback, PlaybackConfig)
        assert isinstance(config.layout, LayoutConfig)
        assert isinstance(config.credentials, CredentialConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.dump(
                {
                    "playback": {"step_interval_ms": 250, "arrow_reveal_delay_ms": 10},
                    "logging": {"level": "DEBUG"},
                }
            )
        )

        config = FlowConfig.from_file(path)

        assert config.playback.step_interval_ms == 250
        assert config.logging.level == "DEBUG"
        assert config.credentials.username == "admin"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"layout": {"marker_offset": 10}}))

        config = FlowConfig.from_file(path)

        assert config.layout.marker_offset == 10.0

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert FlowConfig.from_file(path) == FlowConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FlowConfig.from_file(tmp_path / "missing.yaml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Failed to parse configuration file"):
            FlowConfig.from_file(path)

    @pytest.mark.parametrize("suffix", [".yaml", ".json"])
    def test_to_file(self, tmp_path, suffix):
        config = FlowConfig(playback=PlaybackConfig(step_interval_ms=300))
        path = tmp_path / f"nested/config{suffix}"

        config.to_file(path)

        assert FlowConfig.from_file(path) == config

    def test_from_env(self):
        env = {
            "ZTFLOW_STEP_INTERVAL_MS": "400",
            "ZTFLOW_MFA_CODE": "999999",
            "ZTFLOW_LOG_FORMAT": "text",
        }
        with patch.dict("os.environ", env):
            config = FlowConfig.from_env()

        assert config.playback.step_interval_ms == 400
        assert config.credentials.mfa_code == "999999"
        assert config.logging.format == "text"

    def test_invalid_env_value(self):
        with patch.dict("os.environ", {"ZTFLOW_STEP_INTERVAL_MS": "fast"}):
            with pytest.raises(ValueError, match="ZTFLOW_STEP_INTERVAL_MS"):
                FlowConfig.from_env()

    def test_validate_configuration(self):
        assert FlowConfig().validate_configuration() == []

        config = FlowConfig(
            playback=PlaybackConfig(step_interval_ms=50, arrow_reveal_delay_ms=40),
            layout=LayoutConfig(marker_size=80),
            logging=LoggingConfig(level="DEBUG"),
        )
        warnings = config.validate_configuration()

        assert len(warnings) == 4
        assert any("too fast" in w for w in warnings)
        assert any("half" in w for w in warnings)
        assert any("Marker" in w for w in warnings)
        assert any("credentials" in w for w in warnings)


class TestConfigurationManager:
    """Test ConfigurationManager class."""

    def test_create_default_config_file(self, tmp_path):
        path = tmp_path / "ztflow.yaml"
        ConfigurationManager.create_default_config_file(path)

        assert path.exists()
        assert FlowConfig.from_file(path) == FlowConfig()

    def test_merge_configs(self):
        base = FlowConfig(logging=LoggingConfig(level="DEBUG"))
        override = FlowConfig(playback=PlaybackConfig(step_interval_ms=200))

        merged = ConfigurationManager.merge_configs(base, override)

        assert merged.logging.level == "DEBUG"
        assert merged.playback.step_interval_ms == 200

    def test_merge_nothing(self):
        assert ConfigurationManager.merge_configs() == FlowConfig()

    def test_load_config_env_over_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"playback": {"step_interval_ms": 800}}))

        with patch.dict("os.environ", {"ZTFLOW_LOG_LEVEL": "error"}):
            config = ConfigurationManager.load_config(path)

        assert config.playback.step_interval_ms == 800
        assert config.logging.level == "ERROR"

    def test_load_config_missing_file_uses_defaults(self, tmp_path):
        config = ConfigurationManager.load_config(tmp_path / "missing.yaml", use_env=False)
        assert config == FlowConfig()

    def test_preset_configs(self):
        assert ConfigurationManager.get_default_config() == FlowConfig()

        presentation = ConfigurationManager.get_presentation_config()
        assert presentation.playback.step_interval_ms == 2000
        assert presentation.playback.arrow_reveal_delay_ms == 300

        fast = ConfigurationManager.get_fast_config()
        assert fast.playback.step_interval_ms == 20
        assert fast.playback.arrow_reveal_delay_ms == 5
        assert fast.logging.level == "WARNING"
