"""Exception hierarchy for registry and protocol errors.

Registries raise these typed exceptions; the protocol host translates them
into JSON-RPC errors (``McpError``) for the remote caller.
"""

from __future__ import annotations

from typing import Any

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData


class ToolHostError(Exception):
    """Base exception for all tool host errors."""

    error_code: str = ""
    rpc_code: int = INTERNAL_ERROR

    def __init__(self, message: str, error_code: str | None = None, **kwargs: Any):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.error_code or self.__class__.__name__
        self.__dict__.update(kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a serializable dict."""
        result: dict[str, Any] = {
            "error": True,
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
        }
        # Add any additional attributes
        result.update(
            {k: v for k, v in self.__dict__.items() if k not in ["message", "error_code"]}
        )
        return result

    def to_mcp_error(self) -> McpError:
        """Wrap the error for delivery as a JSON-RPC error response."""
        return McpError(ErrorData(code=self.rpc_code, message=self.message, data=self.to_dict()))


class UnknownToolError(ToolHostError):
    """Raised when a tool name is not registered."""

    error_code = "UNKNOWN_TOOL"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, tool_name: str, **kwargs: Any):
        super().__init__(f"Unknown tool: {tool_name}", "UNKNOWN_TOOL", tool_name=tool_name, **kwargs)


class ToolNotEnabledError(ToolHostError):
    """Raised when a tool is registered but not in the enabled set."""

    error_code = "TOOL_NOT_ENABLED"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, tool_name: str, **kwargs: Any):
        super().__init__(
            f"Tool not enabled: {tool_name}", "TOOL_NOT_ENABLED", tool_name=tool_name, **kwargs
        )


class InvalidParamsError(ToolHostError):
    """Raised when tool arguments are missing or fail validation."""

    error_code = "INVALID_PARAMS"
    rpc_code = INVALID_PARAMS

    def __init__(
        self,
        message: str,
        tool_name: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            kwargs.pop("error_code", "INVALID_PARAMS"),
            tool_name=tool_name,
            errors=errors or [],
            **kwargs,
        )


class InvalidToolsetNameError(InvalidParamsError):
    """Raised when the trigger meta-tool references a tool that does not exist."""

    error_code = "INVALID_TOOLSET_NAME"

    def __init__(
        self,
        message: str,
        names: list[str],
        tool_name: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            message,
            tool_name=tool_name,
            errors=errors,
            error_code="INVALID_TOOLSET_NAME",
            names=names,
        )


class UnknownResourceError(ToolHostError):
    """Raised when a resource URI is not registered."""

    error_code = "UNKNOWN_RESOURCE"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, uri: str, **kwargs: Any):
        super().__init__(f"Unknown resource: {uri}", "UNKNOWN_RESOURCE", uri=uri, **kwargs)


class ResourceNotEnabledError(ToolHostError):
    """Raised when a resource is registered but disabled."""

    error_code = "RESOURCE_NOT_ENABLED"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, uri: str, **kwargs: Any):
        super().__init__(
            f"Resource not enabled: {uri}", "RESOURCE_NOT_ENABLED", uri=uri, **kwargs
        )


class UnknownPromptError(ToolHostError):
    """Raised when a prompt name is not registered."""

    error_code = "UNKNOWN_PROMPT"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, prompt_name: str, **kwargs: Any):
        super().__init__(
            f"Unknown prompt: {prompt_name}", "UNKNOWN_PROMPT", prompt_name=prompt_name, **kwargs
        )


class PromptNotEnabledError(ToolHostError):
    """Raised when a prompt is registered but disabled."""

    error_code = "PROMPT_NOT_ENABLED"
    rpc_code = METHOD_NOT_FOUND

    def __init__(self, prompt_name: str, **kwargs: Any):
        super().__init__(
            f"Prompt not enabled: {prompt_name}",
            "PROMPT_NOT_ENABLED",
            prompt_name=prompt_name,
            **kwargs,
        )


# Re-export for convenience
__all__ = [
    "ToolHostError",
    "UnknownToolError",
    "ToolNotEnabledError",
    "InvalidParamsError",
    "InvalidToolsetNameError",
    "UnknownResourceError",
    "ResourceNotEnabledError",
    "UnknownPromptError",
    "PromptNotEnabledError",
]
