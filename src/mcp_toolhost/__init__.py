"""Host layer for MCP servers with a dynamically switchable tool registry."""

from .config import DynamicToolDiscoveryOptions, Settings, ToolsetConfig
from .exceptions import (
    InvalidParamsError,
    InvalidToolsetNameError,
    ToolHostError,
    ToolNotEnabledError,
    UnknownToolError,
)
from .prompts import PromptCapability, PromptRegistry, prompt
from .resources import ResourceCapability, ResourceRegistry, resource
from .server import ToolHostServer, create_server
from .tools import ToolCapability, ToolDefinition, ToolRegistry, tool

__version__ = "1.0.0"

__all__ = [
    "DynamicToolDiscoveryOptions",
    "InvalidParamsError",
    "InvalidToolsetNameError",
    "PromptCapability",
    "PromptRegistry",
    "ResourceCapability",
    "ResourceRegistry",
    "Settings",
    "ToolCapability",
    "ToolDefinition",
    "ToolHostError",
    "ToolNotEnabledError",
    "ToolRegistry",
    "ToolsetConfig",
    "UnknownToolError",
    "create_server",
    "prompt",
    "resource",
    "tool",
]
