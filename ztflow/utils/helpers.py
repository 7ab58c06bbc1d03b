#!/usr/bin/env python3
"""
Helper utilities for id generation and log-safe formatting.
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

import time
import uuid
from typing import Optional


def generate_correlation_id() -> str:
    """Generate a unique id for tracking a session across log lines."""
    timestamp = int(time.time() * 1000)
    unique_id = str(uuid.uuid4()).replace("-", "")[:12]
    return f"{timestamp}-{unique_id}"


def mask_secret(value: Optional[str], visible: int = 0) -> str:
    """
    Mask a secret for logging.

    Args:
        value: Secret to mask
        visible: Number of leading characters left readable

    Returns:
        Masked string of the same length, or "<empty>"
    """
    if not value:
        return "<empty>"
    visible = max(0, min(visible, len(value)))
    return value[:visible] + "*" * (len(value) - visible)


def format_duration_ms(duration_ms: int) -> str:
    """Format duration in milliseconds to a human-readable string."""
    if duration_ms < 1000:
        return f"{duration_ms}ms"
    elif duration_ms < 60000:
        return f"{duration_ms / 1000:.1f}s"
    else:
        minutes = duration_ms // 60000
        seconds = (duration_ms % 60000) / 1000
        return f"{minutes}m {seconds:.1f}s"
