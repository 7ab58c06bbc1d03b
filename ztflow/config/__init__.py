"""
Configuration module for ztflow.

Copyright (c) 2025 Firefly Software Solutions Inc.
Licensed under the Apache License, Version 2.0 (the "License");
"""

from .flow_config import (
    ConfigurationManager,
    CredentialConfig,
    FlowConfig,
    LayoutConfig,
    LoggingConfig,
    PlaybackConfig,
)

__all__ = [
    "FlowConfig",
    "PlaybackConfig",
    "LayoutConfig",
    "CredentialConfig",
    "LoggingConfig",
    "ConfigurationManager",
]
