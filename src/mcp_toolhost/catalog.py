"""Enabled-set bookkeeping shared by the resource and prompt registries.

Entries are keyed (resource URI or prompt name), start enabled, and can be
added, removed, enabled or disabled at runtime. Every change is reported to
an optional ``on_change(key, definition)`` hook (``definition`` is ``None``
when the entry went away) and to list-changed subscribers.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from typing import Any, Generic, Protocol, TypeVar

from .exceptions import ToolHostError
from .logging_config import create_logger

logger = create_logger(__name__)


class Capability(Protocol):
    @property
    def key(self) -> str: ...

    @property
    def definition(self) -> Any: ...

    @property
    def handler(self) -> Callable[..., Any]: ...


C = TypeVar("C", bound=Capability)

ChangeHook = Callable[[str, Any], None]


class CatalogRegistry(Generic[C]):
    """Insertion-ordered capabilities plus the keys currently enabled."""

    kind = "entry"
    unknown_error: type[ToolHostError] = ToolHostError
    not_enabled_error: type[ToolHostError] = ToolHostError

    def __init__(self, capabilities: Iterable[C] = (), on_change: ChangeHook | None = None):
        self._entries: dict[str, C] = {}
        self._enabled: set[str] = set()
        self._subscribers: dict[Callable[[list[Any]], None], None] = {}
        self.on_change = on_change
        for capability in capabilities:
            if capability.key in self._entries:
                logger.warning(f"Duplicate {self.kind} {capability.key!r}: last registration wins")
            self._entries[capability.key] = capability
            self._enabled.add(capability.key)

    def normalize_key(self, key: str) -> str:
        """Canonical form of an inbound key; identity unless overridden."""
        return key

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.normalize_key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def enabled_keys(self) -> list[str]:
        return [key for key in self._entries if key in self._enabled]

    def is_enabled(self, key: str) -> bool:
        return self.normalize_key(key) in self._enabled

    def definitions(self) -> list[Any]:
        """Definitions of every enabled entry, in registration order."""
        return [self._entries[key].definition for key in self.enabled_keys()]

    def resolve(self, key: str) -> C:
        """Return the enabled capability for ``key`` or raise."""
        canonical = self.normalize_key(key)
        capability = self._entries.get(canonical)
        if capability is None:
            raise self.unknown_error(key)
        if canonical not in self._enabled:
            raise self.not_enabled_error(key)
        return capability

    async def _invoke(self, key: str, *args: Any) -> Any:
        result = self.resolve(key).handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _lookup(self, key: str) -> str:
        canonical = self.normalize_key(key)
        if canonical not in self._entries:
            raise self.unknown_error(key)
        return canonical

    # -- mutation ----------------------------------------------------------

    def add(self, capability: C) -> None:
        self._entries[capability.key] = capability
        self._enabled.add(capability.key)
        logger.info(f"Added {self.kind} {capability.key!r}")
        self._changed(capability.key, capability.definition)

    def remove(self, key: str) -> C:
        key = self._lookup(key)
        self._enabled.discard(key)
        capability = self._entries.pop(key)
        logger.info(f"Removed {self.kind} {key!r}")
        self._changed(key, None)
        return capability

    def enable(self, key: str) -> bool:
        """Enable ``key``. Returns True when the enabled set changed."""
        key = self._lookup(key)
        if key in self._enabled:
            return False
        self._enabled.add(key)
        self._changed(key, self._entries[key].definition)
        return True

    def disable(self, key: str) -> bool:
        """Disable ``key``. Returns True when the enabled set changed."""
        key = self._lookup(key)
        if key not in self._enabled:
            return False
        self._enabled.discard(key)
        self._changed(key, None)
        return True

    # -- subscriptions -----------------------------------------------------

    def on_list_changed(self, callback: Callable[[list[Any]], None]) -> None:
        self._subscribers[callback] = None

    def off_list_changed(self, callback: Callable[[list[Any]], None]) -> None:
        self._subscribers.pop(callback, None)

    def _changed(self, key: str, definition: Any) -> None:
        if self.on_change is not None:
            self.on_change(key, definition)
        definitions = self.definitions()
        for callback in list(self._subscribers):
            callback(definitions)
