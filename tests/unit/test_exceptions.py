"""Tests for the exception hierarchy and its JSON-RPC mapping."""

from __future__ import annotations

from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND

from mcp_toolhost.exceptions import (
    InvalidParamsError,
    InvalidToolsetNameError,
    PromptNotEnabledError,
    ToolHostError,
    ToolNotEnabledError,
    UnknownResourceError,
    UnknownToolError,
)


class TestErrorCodes:
    def test_unknown_and_not_enabled_are_method_not_found(self) -> None:
        assert UnknownToolError("x").rpc_code == METHOD_NOT_FOUND
        assert ToolNotEnabledError("x").rpc_code == METHOD_NOT_FOUND
        assert UnknownResourceError("memo://x").rpc_code == METHOD_NOT_FOUND
        assert PromptNotEnabledError("p").rpc_code == METHOD_NOT_FOUND

    def test_invalid_params(self) -> None:
        assert InvalidParamsError("bad").rpc_code == INVALID_PARAMS
        assert InvalidToolsetNameError("bad", names=["x"]).rpc_code == INVALID_PARAMS

    def test_error_code_strings(self) -> None:
        assert UnknownToolError("x").error_code == "UNKNOWN_TOOL"
        assert ToolNotEnabledError("x").error_code == "TOOL_NOT_ENABLED"
        assert InvalidParamsError("bad").error_code == "INVALID_PARAMS"
        assert InvalidToolsetNameError("bad", names=["x"]).error_code == "INVALID_TOOLSET_NAME"

    def test_hierarchy(self) -> None:
        assert issubclass(InvalidToolsetNameError, InvalidParamsError)
        assert issubclass(UnknownToolError, ToolHostError)
        assert not issubclass(ToolNotEnabledError, UnknownToolError)


class TestSerialization:
    def test_to_dict(self) -> None:
        data = UnknownToolError("ghost").to_dict()
        assert data == {
            "error": True,
            "error_type": "UnknownToolError",
            "error_code": "UNKNOWN_TOOL",
            "message": "Unknown tool: ghost",
            "tool_name": "ghost",
        }

    def test_to_mcp_error(self) -> None:
        err = InvalidToolsetNameError(
            "Invalid parameters", names=["ghost"], tool_name="dynamic_tool_trigger"
        ).to_mcp_error()
        assert err.error.code == INVALID_PARAMS
        assert err.error.message == "Invalid parameters"
        assert err.error.data["names"] == ["ghost"]
        assert err.error.data["error_code"] == "INVALID_TOOLSET_NAME"
