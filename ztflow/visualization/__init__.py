"""
Visualization module for the zero trust flow diagram.

This module provides:
- Geometry of arrows and the moving data marker
- The per-step highlight policy
- Frame rendering to ASCII, SVG, JSON and rich
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

from .geometry import (
    MARKER_OFFSET,
    ArrowGeometry,
    Point,
    arrow_geometry,
    marker_position,
    return_path_geometry,
)
from .highlight import (
    HighlightColor,
    HighlightFrame,
    HighlightResult,
    HighlightTable,
    get_highlight_table,
    highlight,
)
from .renderer import FlowFrame, FlowRenderer, OutputFormat

__all__ = [
    "MARKER_OFFSET",
    "Point",
    "ArrowGeometry",
    "arrow_geometry",
    "marker_position",
    "return_path_geometry",
    "HighlightColor",
    "HighlightFrame",
    "HighlightResult",
    "HighlightTable",
    "get_highlight_table",
    "highlight",
    "FlowFrame",
    "FlowRenderer",
    "OutputFormat",
]
