"""Dynamic discovery meta-tools.

Instead of exposing every tool up front, a server can start with a small
default set and let the caller switch the rest on and off:
  - dynamic_tool_list: report available and enabled tools
  - dynamic_tool_trigger: enable/disable a batch of tools

Both live in the registry like ordinary tools but are always enabled.
"""

from typing import TYPE_CHECKING, Literal

from mcp import types
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from .registry import INVALID_TOOLSET_NAME, ToolCapability, ToolDefinition
from .schema import EmptyInput

if TYPE_CHECKING:
    from ..config import DynamicToolDiscoveryOptions
    from .registry import ToolRegistry


def trigger_input_model(registry: "ToolRegistry") -> type[BaseModel]:
    """Build the trigger input model; tool names are checked against ``registry``."""

    class ToolsetToggle(BaseModel):
        name: str = Field(description="Tool name as reported by the list meta-tool")
        trigger: Literal["enable", "disable"]

        @field_validator("name")
        @classmethod
        def _registered(cls, value: str) -> str:
            if value not in registry:
                raise PydanticCustomError(
                    INVALID_TOOLSET_NAME, "Invalid toolset name: {name}", {"name": value}
                )
            return value

    class DynamicToolTriggerInput(BaseModel):
        toolsets: list[ToolsetToggle] = Field(
            description="Entries applied in order; later entries for a tool win"
        )

    return DynamicToolTriggerInput


def build_dynamic_tools(
    registry: "ToolRegistry", options: "DynamicToolDiscoveryOptions"
) -> list[ToolCapability]:
    """Create the list and trigger meta-tools bound to ``registry``."""

    def list_tools(_: BaseModel) -> types.CallToolResult:
        return registry.snapshot_result()

    def trigger_tools(params: BaseModel) -> types.CallToolResult:
        registry.apply_toggles(
            (toggle.name, toggle.trigger)
            for toggle in params.toolsets  # type: ignore[attr-defined]
        )
        return registry.snapshot_result()

    list_tool = ToolCapability(
        definition=ToolDefinition(
            name=options.list_tool_name,
            description="List, enable, or disable available tools dynamically.",
            input_model=EmptyInput,
            annotations=types.ToolAnnotations(
                title="Dynamic Tool Discovery",
                readOnlyHint=True,
                destructiveHint=False,
                idempotentHint=True,
                openWorldHint=False,
            ),
        ),
        handler=list_tools,
    )
    trigger_tool = ToolCapability(
        definition=ToolDefinition(
            name=options.trigger_tool_name,
            description="Enable or disable multiple toolsets.",
            input_model=trigger_input_model(registry),
            annotations=types.ToolAnnotations(
                title="Dynamic Tool Trigger",
                readOnlyHint=False,
                destructiveHint=False,
                idempotentHint=True,
                openWorldHint=False,
            ),
        ),
        handler=trigger_tools,
    )
    return [list_tool, trigger_tool]
