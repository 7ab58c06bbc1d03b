"""
Logging utilities and configuration for ztflow.

Provides JSON logging with a fixed prefix plus a central manager that is
configured from FlowConfig.logging.
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

from .json_formatter import ZtFlowJSONFormatter, configure_json_logging, create_json_handler
from .manager import (
    ZtFlowLoggingManager,
    get_logging_manager,
    get_ztflow_logger,
    setup_ztflow_logging,
    shutdown_ztflow_logging,
)

__all__ = [
    "ZtFlowJSONFormatter",
    "create_json_handler",
    "configure_json_logging",
    "ZtFlowLoggingManager",
    "get_logging_manager",
    "setup_ztflow_logging",
    "get_ztflow_logger",
    "shutdown_ztflow_logging",
]
