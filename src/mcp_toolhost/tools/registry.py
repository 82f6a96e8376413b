"""Tool registry: definitions, handlers and the enabled-set state machine.

The registry decides, for every ``tools/list`` and ``tools/call``, which
tools are visible and callable. With dynamic discovery on, two meta-tools
(see :mod:`.router`) let the remote caller enable and disable tools at
runtime; every change to the enabled set is pushed to subscribers.
"""

from __future__ import annotations

import functools
import inspect
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Literal

from mcp import types
from pydantic import BaseModel, ValidationError

from ..config import DynamicToolDiscoveryOptions, ToolsetConfig
from ..exceptions import (
    InvalidParamsError,
    InvalidToolsetNameError,
    ToolNotEnabledError,
    UnknownToolError,
)
from ..logging_config import create_logger
from ..naming import ToolNamespace
from .schema import (
    EmptyInput,
    format_validation_errors,
    render_input_schema,
    summarize_validation_errors,
)

logger = create_logger(__name__)

ToolHandler = Callable[[Any], Any]
ToolListCallback = Callable[[list[types.Tool]], None]
Trigger = Literal["enable", "disable"]

INVALID_TOOLSET_NAME = "invalid_toolset_name"
"""pydantic error type raised when a trigger entry names an unknown tool."""


@dataclass
class ToolDefinition:
    """Declarative description of a single tool."""

    name: str
    description: str
    input_model: type[BaseModel] | None = None
    annotations: types.ToolAnnotations | None = None

    @property
    def model(self) -> type[BaseModel]:
        return self.input_model or EmptyInput

    @property
    def read_only(self) -> bool:
        return self.annotations is not None and self.annotations.readOnlyHint is True

    @functools.cached_property
    def input_schema(self) -> dict[str, Any]:
        return render_input_schema(self.model)

    def validate(self, arguments: Any) -> BaseModel:
        """Validate raw arguments against the input model.

        Raises:
            InvalidToolsetNameError: An argument names a tool that does not exist.
            InvalidParamsError: Any other validation failure.
        """
        try:
            return self.model.model_validate(arguments)
        except ValidationError as exc:
            errors = format_validation_errors(exc)
            message = f"Invalid parameters: {summarize_validation_errors(errors)}"
            bad_names = [
                str(e["input"]) for e in exc.errors() if e["type"] == INVALID_TOOLSET_NAME
            ]
            if bad_names:
                raise InvalidToolsetNameError(
                    message, names=bad_names, tool_name=self.name, errors=errors
                ) from exc
            raise InvalidParamsError(message, tool_name=self.name, errors=errors) from exc


@dataclass
class ToolCapability:
    """A tool definition paired with the handler that implements it.

    The handler receives the validated input model instance and may be a
    plain function or a coroutine function.
    """

    definition: ToolDefinition
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.definition.name


def tool(
    name: str | None = None,
    description: str | None = None,
    *,
    input_model: type[BaseModel] | None = None,
    annotations: types.ToolAnnotations | None = None,
) -> Callable[[ToolHandler], ToolCapability]:
    """Decorator turning a handler function into a :class:`ToolCapability`.

    The tool name defaults to the function name and the description to its
    docstring.
    """

    def decorator(func: ToolHandler) -> ToolCapability:
        definition = ToolDefinition(
            name=name or func.__name__,
            description=description or inspect.getdoc(func) or "",
            input_model=input_model,
            annotations=annotations,
        )
        return ToolCapability(definition=definition, handler=func)

    return decorator


class ToolRegistry:
    """Registered tools plus the set of names currently enabled.

    Args:
        capabilities: Tools to register. Duplicate names: the last one wins.
        toolset_config: Mode gate for default enablement.
        dynamic_tool_discovery: Meta-tool configuration; off when ``None``.
        namespace: Optional server name used to qualify external tool names.
    """

    def __init__(
        self,
        capabilities: Iterable[ToolCapability] = (),
        toolset_config: ToolsetConfig | None = None,
        dynamic_tool_discovery: DynamicToolDiscoveryOptions | None = None,
        namespace: str | None = None,
    ):
        self.toolset_config = toolset_config or ToolsetConfig()
        self.dynamic_tool_discovery = dynamic_tool_discovery or DynamicToolDiscoveryOptions()
        self.namespace = ToolNamespace(namespace)

        self._tools: dict[str, ToolCapability] = {}
        self._enabled: set[str] = set()
        self._subscribers: dict[ToolListCallback, None] = {}
        self._meta_tools: frozenset[str] = frozenset()

        for capability in capabilities:
            if capability.name in self._tools:
                logger.warning(f"Duplicate tool {capability.name!r}: last registration wins")
            self._tools[capability.name] = capability

        if self.dynamic_tool_discovery.enabled:
            for tool_name in self.dynamic_tool_discovery.default_enabled_toolsets:
                if tool_name in self._tools:
                    self._enabled.add(tool_name)
                else:
                    logger.warning(f"Default toolset {tool_name!r} is not a registered tool")
            self._install_meta_tools()
        else:
            self._enabled.update(
                name for name, capability in self._tools.items() if self._can_enable(capability)
            )

        logger.debug(
            f"Registry ready: {len(self._tools)} tools, {len(self._enabled)} enabled "
            f"(mode={self.toolset_config.mode}, dynamic={self.dynamic_tool_discovery.enabled})"
        )

    def _install_meta_tools(self) -> None:
        from .router import build_dynamic_tools

        meta = build_dynamic_tools(self, self.dynamic_tool_discovery)
        for capability in meta:
            if capability.name in self._tools:
                logger.warning(f"Tool {capability.name!r} is shadowed by a dynamic discovery tool")
            self._tools[capability.name] = capability
            self._enabled.add(capability.name)
        self._meta_tools = frozenset(capability.name for capability in meta)

    def _can_enable(self, capability: ToolCapability) -> bool:
        if self.toolset_config.read_only:
            return capability.definition.read_only
        return True

    # -- queries -----------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.namespace.to_internal(name) in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def has_tools(self) -> bool:
        return bool(self._tools)

    def dynamic_tool_discovery_enabled(self) -> bool:
        return self.dynamic_tool_discovery.enabled

    def is_meta_tool(self, name: str) -> bool:
        return self.namespace.to_internal(name) in self._meta_tools

    def is_enabled(self, name: str) -> bool:
        return self.namespace.to_internal(name) in self._enabled

    def get(self, name: str) -> ToolCapability | None:
        return self._tools.get(self.namespace.to_internal(name))

    def tool_names(self) -> list[str]:
        """Bare names of all registered tools, in registration order."""
        return list(self._tools)

    def enabled_tool_names(self) -> list[str]:
        """Bare names of enabled tools, in registration order."""
        return [name for name in self._tools if name in self._enabled]

    def snapshot(self) -> dict[str, list[str]]:
        """Available and enabled tools, as external names."""
        return {
            "available": [self.namespace.to_external(name) for name in self._tools],
            "enabled": [self.namespace.to_external(name) for name in self.enabled_tool_names()],
        }

    def snapshot_result(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=json.dumps(self.snapshot(), indent=2))]
        )

    def list_tools(self) -> list[types.Tool]:
        """Advertised definitions of every enabled tool, in registration order."""
        tools: list[types.Tool] = []
        for name in self.enabled_tool_names():
            definition = self._tools[name].definition
            annotations = definition.annotations
            if annotations is not None and self.namespace.name:
                title = self.namespace.describe(annotations.title or definition.description)
                annotations = annotations.model_copy(update={"title": title})
            tools.append(
                types.Tool(
                    name=self.namespace.to_external(definition.name),
                    description=self.namespace.describe(definition.description),
                    inputSchema=definition.input_schema,
                    annotations=annotations,
                )
            )
        return tools

    # -- calls -------------------------------------------------------------

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> Any:
        """Validate ``arguments`` and invoke the tool's handler.

        Raises:
            UnknownToolError: ``name`` is not registered.
            ToolNotEnabledError: ``name`` is registered but disabled.
            InvalidParamsError: ``arguments`` is missing or invalid.

        Exceptions raised by the handler itself propagate unchanged.
        """
        internal = self.namespace.to_internal(name)
        capability = self._tools.get(internal)
        if capability is None:
            raise UnknownToolError(name)
        if internal not in self._enabled:
            raise ToolNotEnabledError(name)
        if arguments is None:
            raise InvalidParamsError(f"Invalid parameters: {arguments}", tool_name=name)

        params = capability.definition.validate(arguments)
        logger.debug(f"Calling tool {internal!r}")
        result = capability.handler(params)
        if inspect.isawaitable(result):
            result = await result
        return result

    # -- enabled-set mutation ----------------------------------------------

    def apply_toggles(self, toggles: Iterable[tuple[str, Trigger]]) -> None:
        """Apply enable/disable entries in order, then notify once.

        Later entries for the same tool override earlier ones. Meta-tools are
        always enabled; toggling them is ignored.
        """
        resolved: list[tuple[str, Trigger]] = []
        for name, trigger in toggles:
            internal = self.namespace.to_internal(name)
            if internal not in self._tools:
                raise UnknownToolError(name)
            if trigger not in ("enable", "disable"):
                raise ValueError(f"Invalid trigger {trigger!r} for {name!r}")
            resolved.append((internal, trigger))

        # Nothing is mutated until the whole batch has been checked
        for internal, trigger in resolved:
            if internal in self._meta_tools:
                logger.debug(f"Ignoring {trigger} of meta-tool {internal!r}")
            elif trigger == "enable":
                self._enabled.add(internal)
            else:
                self._enabled.discard(internal)
        logger.info(f"Enabled tools: {', '.join(self.enabled_tool_names()) or '(none)'}")
        self._notify_enabled_tools_changed()

    def enable_tool(self, name: str) -> bool:
        """Enable one tool. Returns True when the enabled set changed."""
        return self._toggle(name, "enable")

    def disable_tool(self, name: str) -> bool:
        """Disable one tool. Returns True when the enabled set changed."""
        return self._toggle(name, "disable")

    def _toggle(self, name: str, trigger: Trigger) -> bool:
        internal = self.namespace.to_internal(name)
        if internal not in self._tools:
            raise UnknownToolError(name)
        if internal in self._meta_tools:
            return False
        was_enabled = internal in self._enabled
        if trigger == "enable":
            self._enabled.add(internal)
        else:
            self._enabled.discard(internal)
        changed = was_enabled != (internal in self._enabled)
        if changed:
            self._notify_enabled_tools_changed()
        return changed

    def add_tool(self, capability: ToolCapability) -> None:
        """Register or replace a tool; it is enabled when the mode gate allows it."""
        if capability.name in self._meta_tools:
            raise ValueError(f"Cannot replace dynamic discovery tool {capability.name!r}")
        self._tools[capability.name] = capability
        if self._can_enable(capability):
            self._enabled.add(capability.name)
        else:
            self._enabled.discard(capability.name)
        logger.info(f"Added tool {capability.name!r}")
        self._notify_enabled_tools_changed()

    def remove_tool(self, name: str) -> ToolCapability:
        """Unregister a tool and drop it from the enabled set."""
        internal = self.namespace.to_internal(name)
        if internal not in self._tools:
            raise UnknownToolError(name)
        if internal in self._meta_tools:
            raise ValueError(f"Cannot remove dynamic discovery tool {internal!r}")
        self._enabled.discard(internal)
        capability = self._tools.pop(internal)
        logger.info(f"Removed tool {internal!r}")
        self._notify_enabled_tools_changed()
        return capability

    def set_namespace(self, name: str | None) -> None:
        """Rename the namespace used for external tool names."""
        self.namespace = ToolNamespace(name)
        if self.dynamic_tool_discovery.enabled:
            self._notify_enabled_tools_changed()

    # -- subscriptions -----------------------------------------------------

    def on_enabled_tools_changed(self, callback: ToolListCallback) -> None:
        self._subscribers[callback] = None

    def off_enabled_tools_changed(self, callback: ToolListCallback) -> None:
        self._subscribers.pop(callback, None)

    def _notify_enabled_tools_changed(self) -> None:
        tools = self.list_tools()
        for callback in list(self._subscribers):
            callback(tools)
