"""Global constants for the tool host."""

# Dynamic discovery meta-tools
DYNAMIC_TOOL_LIST = "dynamic_tool_list"
"""Wire name of the meta-tool that reports available and enabled tools."""

DYNAMIC_TOOL_TRIGGER = "dynamic_tool_trigger"
"""Wire name of the meta-tool that enables or disables tools in a batch."""

# Name-spacing
NAMESPACE_SEPARATOR = "::"
"""Separator between the server namespace and a tool name (``server::tool``)."""

# Toolset modes
MODE_READ_ONLY = "readOnly"
MODE_READ_WRITE = "readWrite"

# Server defaults
DEFAULT_SERVER_NAME = "mcp-toolhost"
DEFAULT_SERVER_VERSION = "1.0.0"
DEFAULT_SSE_PORT = 3000
"""Default HTTP port for the SSE transport."""
