"""
Centralized logging manager for ztflow.

Provides unified logging setup with JSON or text formatting and optional
rotating file output, configured from FlowConfig.logging.
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
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

from .json_formatter import ZtFlowJSONFormatter

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ZTFLOW_LOGGERS = [
    "ztflow.engine",
    "ztflow.events",
    "ztflow.session",
    "ztflow.visualization",
    "ztflow.cli",
    "ztflow.logging",
]


class ZtFlowLoggingManager:
    """
    Central manager for the ztflow logging system.

    Installs console (and optionally rotating file) handlers on the ztflow
    root logger. Handlers it installed are removed again on shutdown.
    """

    def __init__(self, config=None, stream=None):
        """
        Initialize the logging manager.

        Args:
            config: FlowConfig containing logging settings
            stream: Console stream (defaults to sys.stderr)
        """
        self.config = config
        self.stream = stream
        self.configured = False
        self._handlers: List[logging.Handler] = []

        self.log_level = logging.INFO
        self.format_type = "json"
        self.output_file: Optional[str] = None
        self.max_file_size_mb = 10
        self.backup_count = 3

        if config and hasattr(config, "logging"):
            logging_config = config.logging
            self.log_level = getattr(logging, logging_config.level)
            self.format_type = logging_config.format
            self.output_file = logging_config.output_file
            self.max_file_size_mb = logging_config.max_file_size_mb
            self.backup_count = logging_config.backup_count

    def _make_formatter(self) -> logging.Formatter:
        if self.format_type == "json":
            return ZtFlowJSONFormatter()
        return logging.Formatter(TEXT_FORMAT)

    def setup_logging(self) -> None:
        """Setup the ztflow logging system."""
        if self.configured:
            return

        root = logging.getLogger("ztflow")
        root.setLevel(self.log_level)
        root.propagate = False

        console_handler = logging.StreamHandler(self.stream or sys.stderr)
        console_handler.setFormatter(self._make_formatter())
        console_handler.setLevel(self.log_level)
        self._add_handler(root, console_handler)

        if self.output_file:
            self._setup_file_logging(root)

        for logger_name in ZTFLOW_LOGGERS:
            logger = logging.getLogger(logger_name)
            logger.setLevel(self.log_level)
            logger.propagate = True

        self.configured = True

        logging.getLogger("ztflow.logging").info(
            "ztflow logging system initialized",
            extra={
                "log_level": logging.getLevelName(self.log_level),
                "format_type": self.format_type,
                "output_file": self.output_file,
            },
        )

    def _setup_file_logging(self, root: logging.Logger) -> None:
        output_path = Path(self.output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(output_path),
            maxBytes=self.max_file_size_mb * 1024 * 1024,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(self._make_formatter())
        file_handler.setLevel(self.log_level)
        self._add_handler(root, file_handler)

    def _add_handler(self, logger: logging.Logger, handler: logging.Handler) -> None:
        logger.addHandler(handler)
        self._handlers.append(handler)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a configured logger for the given name."""
        if not self.configured:
            self.setup_logging()

        return logging.getLogger(name)

    def shutdown(self) -> None:
        """Remove and close the handlers this manager installed."""
        root = logging.getLogger("ztflow")
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self.configured = False


_logging_manager: Optional[ZtFlowLoggingManager] = None


def get_logging_manager(config=None) -> ZtFlowLoggingManager:
    """Get or create the global logging manager."""
    global _logging_manager

    if _logging_manager is None:
        _logging_manager = ZtFlowLoggingManager(config)

    return _logging_manager


def setup_ztflow_logging(config=None) -> None:
    """Setup the ztflow logging system."""
    get_logging_manager(config).setup_logging()


def get_ztflow_logger(name: str) -> logging.Logger:
    """Get a ztflow logger with proper configuration."""
    if not name.startswith("ztflow"):
        name = f"ztflow.{name}"
    return get_logging_manager().get_logger(name)


def shutdown_ztflow_logging() -> None:
    """Shutdown the ztflow logging system."""
    global _logging_manager

    if _logging_manager:
        _logging_manager.shutdown()
        _logging_manager = None
