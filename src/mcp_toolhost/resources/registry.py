"""Resource registry: named, read-only data exposed by URI."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl, ValidationError

from ..catalog import CatalogRegistry
from ..exceptions import ResourceNotEnabledError, UnknownResourceError

ResourceHandler = Callable[[str], Any]


@dataclass
class ResourceCapability:
    """A resource definition and the handler that reads it.

    The handler receives the URI and returns ``str`` or ``bytes`` (sync or
    async).
    """

    definition: types.Resource
    handler: ResourceHandler

    @property
    def key(self) -> str:
        # Already normalized by AnyUrl, e.g. "https://example.com" -> "https://example.com/"
        return str(self.definition.uri)


def resource(
    uri: str,
    name: str | None = None,
    description: str | None = None,
    *,
    mime_type: str = "text/plain",
) -> Callable[[ResourceHandler], ResourceCapability]:
    """Decorator turning a reader function into a :class:`ResourceCapability`."""

    def decorator(func: ResourceHandler) -> ResourceCapability:
        definition = types.Resource(
            uri=uri,  # type: ignore[arg-type]
            name=name or func.__name__,
            description=description or func.__doc__,
            mimeType=mime_type,
        )
        return ResourceCapability(definition=definition, handler=func)

    return decorator


class ResourceRegistry(CatalogRegistry[ResourceCapability]):
    """Registered resources; all start enabled."""

    kind = "resource"
    unknown_error = UnknownResourceError
    not_enabled_error = ResourceNotEnabledError

    def __init__(
        self,
        capabilities: Iterable[ResourceCapability] = (),
        on_change: Callable[[str, Any], None] | None = None,
    ):
        super().__init__(capabilities, on_change)

    def normalize_key(self, key: str) -> str:
        try:
            return str(AnyUrl(key))
        except ValidationError:
            return key

    def list_resources(self) -> list[types.Resource]:
        return self.definitions()

    async def read_resource(self, uri: str) -> list[ReadResourceContents]:
        """Read an enabled resource.

        Raises:
            UnknownResourceError: ``uri`` is not registered.
            ResourceNotEnabledError: ``uri`` is registered but disabled.
        """
        capability = self.resolve(uri)
        data = await self._invoke(uri, capability.key)
        mime_type = capability.definition.mimeType
        return [ReadResourceContents(content=data, mime_type=mime_type)]
