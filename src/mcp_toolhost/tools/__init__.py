"""Tool registry, input shapes and dynamic discovery meta-tools."""

from .registry import (
    ToolCapability,
    ToolDefinition,
    ToolRegistry,
    tool,
)
from .router import build_dynamic_tools
from .schema import EmptyInput, render_input_schema

__all__ = [
    "EmptyInput",
    "ToolCapability",
    "ToolDefinition",
    "ToolRegistry",
    "build_dynamic_tools",
    "render_input_schema",
    "tool",
]
