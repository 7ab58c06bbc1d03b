"""
JSON logging formatter for ztflow.

Formats every log entry as a single JSON line with the ztflow prefix and
any structured ``extra`` fields (run_id, scenario, step_index, ...).
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
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

DEFAULT_PREFIX = "ztflow::playback::log"

# Extra fields that describe the playback run a record belongs to
PLAYBACK_FIELDS = ("run_id", "scenario", "step_index", "step_count", "session_id", "duration")

_RESERVED_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class ZtFlowJSONFormatter(logging.Formatter):
    """
    JSON formatter for playback logs.

    Each entry carries the ``ztflow::playback::log`` prefix. Run context
    passed through ``extra`` (run id, scenario, step index and so on) is
    grouped under ``"playback"``; any other extra fields go under
    ``"context"``.
    """

    def __init__(self, prefix: Optional[str] = None, include_extra: bool = True):
        super().__init__()
        self.prefix = prefix or DEFAULT_PREFIX
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "prefix": self.prefix,
            "source": f"{record.module}:{record.lineno}",
        }

        if self.include_extra:
            playback, context = self._split_extra(record)
            if playback:
                log_data["playback"] = playback
            if context:
                log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, separators=(",", ":"), default=str)

    @staticmethod
    def _split_extra(record: logging.LogRecord):
        playback: Dict[str, Any] = {}
        context: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_FIELDS or key.startswith("_") or value is None:
                continue
            if key in PLAYBACK_FIELDS:
                playback[key] = value
            else:
                context[key] = value
        # Fixed key order regardless of how extra was built
        playback = {key: playback[key] for key in PLAYBACK_FIELDS if key in playback}
        return playback, context


def create_json_handler(level: int = logging.INFO, stream=None) -> logging.Handler:
    """Create a stream handler (stdout by default) with JSON formatting."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ZtFlowJSONFormatter())
    return handler


def configure_json_logging(logger_name: str = "ztflow", level: int = logging.INFO) -> logging.Logger:
    """
    Configure JSON logging on a single logger, without touching the root logger.

    Args:
        logger_name: Name of the logger to configure
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(create_json_handler(level))
    logger.propagate = False
    return logger
