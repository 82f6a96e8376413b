"""Name-spacing of tool names and descriptions at the protocol boundary.

When several tool servers are mounted behind one client, names are
qualified as ``<server>::<tool>`` and descriptions tagged ``[<server>]``.
This is a pure string mapping; the registry state always uses bare names.
"""

from __future__ import annotations

import re

from .constants import NAMESPACE_SEPARATOR

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse every non-alphanumeric run into ``_``.

    >>> slugify("Hello World-Server")
    'hello_world_server'
    """
    return _NON_ALNUM.sub("_", name.lower()).strip("_")


class ToolNamespace:
    """Maps bare tool names to and from their externally qualified form."""

    def __init__(self, name: str | None = None):
        self.name = name or None

    @property
    def prefix(self) -> str:
        return f"{self.name}{NAMESPACE_SEPARATOR}" if self.name else ""

    def to_external(self, tool_name: str) -> str:
        return f"{self.prefix}{tool_name}"

    def to_internal(self, tool_name: str) -> str:
        """Strip the namespace prefix; unqualified names pass through."""
        if self.name and tool_name.startswith(self.prefix):
            return tool_name[len(self.prefix) :]
        return tool_name

    def describe(self, description: str) -> str:
        if not self.name:
            return description
        return f"[{self.name}] {description}"

    def __repr__(self) -> str:
        return f"ToolNamespace({self.name!r})"
