"""Configuration: registry construction options and environment settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_SERVER_NAME,
    DEFAULT_SERVER_VERSION,
    DEFAULT_SSE_PORT,
    DYNAMIC_TOOL_LIST,
    DYNAMIC_TOOL_TRIGGER,
    MODE_READ_ONLY,
    MODE_READ_WRITE,
)
from .naming import slugify

ToolMode = Literal["readOnly", "readWrite"]


@dataclass(frozen=True)
class ToolsetConfig:
    """Coarse policy gating which tools are enabled by default.

    In ``readOnly`` mode only tools annotated ``readOnlyHint=True`` are
    enabled by default; in ``readWrite`` mode every tool is.
    """

    mode: ToolMode = MODE_READ_WRITE

    def __post_init__(self) -> None:
        if self.mode not in (MODE_READ_ONLY, MODE_READ_WRITE):
            raise ValueError(
                f"Invalid toolset mode {self.mode!r}; expected {MODE_READ_ONLY!r} "
                f"or {MODE_READ_WRITE!r}"
            )

    @property
    def read_only(self) -> bool:
        return self.mode == MODE_READ_ONLY


@dataclass(frozen=True)
class DynamicToolDiscoveryOptions:
    """Runtime enable/disable of tools through the two meta-tools.

    Attributes:
        enabled: Register the meta-tools and start from ``default_enabled_toolsets``.
        default_enabled_toolsets: Tool names enabled at startup.
        name: Optional prefix for the meta-tool names, slugified
            (``"My Server"`` gives ``my_server_dynamic_tool_list``).
    """

    enabled: bool = False
    default_enabled_toolsets: tuple[str, ...] = field(default_factory=tuple)
    name: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of names, store an immutable copy
        object.__setattr__(self, "default_enabled_toolsets", tuple(self.default_enabled_toolsets))

    @property
    def list_tool_name(self) -> str:
        return self._prefixed(DYNAMIC_TOOL_LIST)

    @property
    def trigger_tool_name(self) -> str:
        return self._prefixed(DYNAMIC_TOOL_TRIGGER)

    def _prefixed(self, base: str) -> str:
        slug = slugify(self.name) if self.name else ""
        return f"{slug}_{base}" if slug else base


class Settings(BaseSettings):
    """Tool host settings loaded from ``TOOLHOST_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLHOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server identity
    server_name: str = DEFAULT_SERVER_NAME
    server_version: str = DEFAULT_SERVER_VERSION

    # Tool exposure
    toolset_mode: ToolMode = MODE_READ_ONLY
    dynamic_tool_discovery: bool = False
    default_enabled_toolsets: str = ""  # comma-separated tool names
    dynamic_tool_discovery_name: str | None = None
    namespace_tools: bool = False  # qualify tool names as "<server_name>::<tool>"

    # Transport
    transport: Literal["stdio", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = DEFAULT_SSE_PORT

    log_level: str = "INFO"

    def toolset_config(self) -> ToolsetConfig:
        return ToolsetConfig(mode=self.toolset_mode)

    def dynamic_discovery_options(self) -> DynamicToolDiscoveryOptions:
        names = tuple(n.strip() for n in self.default_enabled_toolsets.split(",") if n.strip())
        return DynamicToolDiscoveryOptions(
            enabled=self.dynamic_tool_discovery,
            default_enabled_toolsets=names,
            name=self.dynamic_tool_discovery_name,
        )

    @property
    def namespace(self) -> str | None:
        return self.server_name if self.namespace_tools else None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
