#!/usr/bin/env python3
"""
Configuration classes for the flow playback engine.

Covers playback timing, diagram layout, the demo credentials used by the
session controller, and logging. The topology itself is compiled in and is
not configurable.
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
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_ENV_PREFIX = "ZTFLOW_"


class PlaybackConfig(BaseModel):
    """Timing of a playback run."""

    step_interval_ms: int = Field(default=1000, ge=1, description="Delay between step ticks")
    arrow_reveal_delay_ms: int = Field(
        default=50, ge=0, description="Delay before an arrow grows to full length after a step"
    )

    @field_validator("arrow_reveal_delay_ms")
    @classmethod
    def reveal_must_fit_in_step(cls, v, info):
        if "step_interval_ms" in info.data and v >= info.data["step_interval_ms"]:
            raise ValueError("arrow_reveal_delay_ms must be less than step_interval_ms")
        return v

    @property
    def step_interval(self) -> float:
        """Step interval in seconds."""
        return self.step_interval_ms / 1000.0

    @property
    def arrow_reveal_delay(self) -> float:
        """Arrow reveal delay in seconds."""
        return self.arrow_reveal_delay_ms / 1000.0


class LayoutConfig(BaseModel):
    """Diagram canvas and glyph sizes used by the renderer."""

    marker_offset: float = Field(
        default=20.0, ge=0, description="Offset that centers the data marker on a node glyph"
    )
    icon_size: int = Field(default=60, ge=1, description="Node glyph diameter in pixels")
    marker_size: int = Field(default=20, ge=1, description="Data marker diameter in pixels")
    canvas_width: int = Field(default=900, ge=100, description="Canvas width in pixels")
    canvas_height: int = Field(default=350, ge=100, description="Canvas height in pixels")


class CredentialConfig(BaseModel):
    """Fixed demo credentials. This is a teaching visualization, not an auth system."""

    username: str = Field(default="admin", min_length=1)
    password: str = Field(default="password", min_length=1)
    mfa_code: str = Field(default="123456", min_length=1)


class LoggingConfig(BaseModel):
    """Configuration for the ztflow logging system."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format: json or text")
    output_file: Optional[str] = Field(default=None, description="Log output file path")
    max_file_size_mb: int = Field(default=10, ge=1, description="Maximum log file size in MB")
    backup_count: int = Field(default=3, ge=1, description="Number of backup log files to keep")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()


# Environment variable -> (dotted config key, converter)
_ENV_MAPPINGS = {
    "STEP_INTERVAL_MS": ("playback.step_interval_ms", int),
    "ARROW_REVEAL_DELAY_MS": ("playback.arrow_reveal_delay_ms", int),
    "MARKER_OFFSET": ("layout.marker_offset", float),
    "USERNAME": ("credentials.username", str),
    "PASSWORD": ("credentials.password", str),
    "MFA_CODE": ("credentials.mfa_code", str),
    "LOG_LEVEL": ("logging.level", str),
    "LOG_FORMAT": ("logging.format", str),
    "LOG_FILE": ("logging.output_file", str),
}


class FlowConfig(BaseModel):
    """Main configuration for the flow playback engine."""

    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    credentials: CredentialConfig = Field(default_factory=CredentialConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "FlowConfig":
        """Load configuration from a JSON or YAML file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix.lower() in [".yml", ".yaml"]:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to parse configuration file: {e}")

        return cls(**(data or {}))

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX) -> "FlowConfig":
        """Load configuration from environment variables; unset values keep their defaults."""
        return cls(**ConfigurationManager._get_env_overrides(prefix))

    def to_file(self, config_path: Union[str, Path], format: str = "auto") -> None:
        """Save configuration to a file."""
        path = Path(config_path)

        if format == "auto":
            format = "yaml" if path.suffix.lower() in [".yml", ".yaml"] else "json"

        data = self.model_dump()

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False, indent=2)
        else:
            content = json.dumps(data, indent=2)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def validate_configuration(self) -> List[str]:
        """Validate the configuration and return any warnings."""
        warnings = []

        if self.playback.step_interval_ms < 100:
            warnings.append("Step interval below 100ms is too fast to follow visually")
        if self.playback.step_interval_ms > 10000:
            warnings.append("Step interval above 10s makes a run very slow")
        if self.playback.arrow_reveal_delay_ms * 2 > self.playback.step_interval_ms:
            warnings.append("Arrow reveal delay takes more than half of each step")

        if self.layout.marker_size > self.layout.icon_size:
            warnings.append("Marker is larger than the node glyph it sits on")

        if self.credentials == CredentialConfig() and self.logging.level == "DEBUG":
            warnings.append("Default demo credentials in use with DEBUG logging")

        return warnings


class ConfigurationManager:
    """Utility class for managing configurations."""

    @staticmethod
    def create_default_config_file(path: Union[str, Path], format: str = "auto") -> None:
        """Create a default configuration file."""
        FlowConfig().to_file(path, format)

    @staticmethod
    def merge_configs(*configs: FlowConfig) -> FlowConfig:
        """Merge multiple configurations, with later configs taking precedence."""
        if not configs:
            return FlowConfig()

        merged_data = configs[0].model_dump()

        for config in configs[1:]:
            merged_data = ConfigurationManager._deep_merge(
                merged_data, config.model_dump(exclude_defaults=True)
            )

        return FlowConfig(**merged_data)

    @staticmethod
    def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigurationManager._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def load_config(
        config_file: Optional[Union[str, Path]] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        use_env: bool = True,
    ) -> FlowConfig:
        """Load configuration from file and/or environment variables."""
        if config_file:
            try:
                base_config = FlowConfig.from_file(config_file)
            except FileNotFoundError:
                base_config = FlowConfig()
        else:
            base_config = FlowConfig()

        if use_env:
            env_overrides = ConfigurationManager._get_env_overrides(env_prefix)
            if env_overrides:
                merged_data = ConfigurationManager._deep_merge(
                    base_config.model_dump(), env_overrides
                )
                return FlowConfig(**merged_data)

        return base_config

    @staticmethod
    def _get_env_overrides(prefix: str = DEFAULT_ENV_PREFIX) -> Dict[str, Any]:
        """Get only the environment variable overrides that are actually set."""
        config_data: Dict[str, Any] = {}

        for suffix, (config_key, converter) in _ENV_MAPPINGS.items():
            env_var = f"{prefix}{suffix}"
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                converted_value = converter(value)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid value for {env_var}: {value} ({e})")

            parts = config_key.split(".")
            current = config_data
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = converted_value

        return config_data

    @staticmethod
    def get_default_config() -> FlowConfig:
        """Default configuration: one second per step, 50ms arrow reveal."""
        return FlowConfig()

    @staticmethod
    def get_presentation_config() -> FlowConfig:
        """
        Slower timing for walking an audience through the flow.

        Returns:
            FlowConfig: Two seconds per step, 300ms arrow reveal
        """
        return FlowConfig(
            playback=PlaybackConfig(step_interval_ms=2000, arrow_reveal_delay_ms=300),
        )

    @staticmethod
    def get_fast_config() -> FlowConfig:
        """
        Fast timing for tests and CI.

        Returns:
            FlowConfig: 20ms per step, 5ms arrow reveal, text logs at WARNING
        """
        return FlowConfig(
            playback=PlaybackConfig(step_interval_ms=20, arrow_reveal_delay_ms=5),
            logging=LoggingConfig(level="WARNING", format="text"),
        )
