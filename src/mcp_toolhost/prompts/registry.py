"""Prompt registry: named conversation templates."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from mcp import types

from ..catalog import CatalogRegistry
from ..exceptions import InvalidParamsError, PromptNotEnabledError, UnknownPromptError

PromptHandler = Callable[[dict[str, str]], Any]


@dataclass
class PromptCapability:
    """A prompt definition and the handler that renders it.

    The handler receives the prompt arguments and returns either a string
    (sent as a single user message) or a ``GetPromptResult``.
    """

    definition: types.Prompt
    handler: PromptHandler

    @property
    def key(self) -> str:
        return self.definition.name


def prompt(
    name: str | None = None,
    description: str | None = None,
    *,
    arguments: list[types.PromptArgument] | None = None,
) -> Callable[[PromptHandler], PromptCapability]:
    """Decorator turning a render function into a :class:`PromptCapability`."""

    def decorator(func: PromptHandler) -> PromptCapability:
        definition = types.Prompt(
            name=name or func.__name__,
            description=description or func.__doc__,
            arguments=arguments or [],
        )
        return PromptCapability(definition=definition, handler=func)

    return decorator


class PromptRegistry(CatalogRegistry[PromptCapability]):
    """Registered prompts; all start enabled."""

    kind = "prompt"
    unknown_error = UnknownPromptError
    not_enabled_error = PromptNotEnabledError

    def __init__(
        self,
        capabilities: Iterable[PromptCapability] = (),
        on_change: Callable[[str, Any], None] | None = None,
    ):
        super().__init__(capabilities, on_change)

    def list_prompts(self) -> list[types.Prompt]:
        return self.definitions()

    async def get_prompt(
        self, name: str, arguments: dict[str, str] | None = None
    ) -> types.GetPromptResult:
        """Render an enabled prompt.

        Raises:
            UnknownPromptError: ``name`` is not registered.
            PromptNotEnabledError: ``name`` is registered but disabled.
            InvalidParamsError: A required argument is missing.
        """
        definition = self.resolve(name).definition
        arguments = arguments or {}
        missing = [
            arg.name for arg in definition.arguments or [] if arg.required and arg.name not in arguments
        ]
        if missing:
            raise InvalidParamsError(
                f"Missing required prompt arguments: {', '.join(missing)}", prompt_name=name
            )

        result = await self._invoke(name, arguments)
        if isinstance(result, types.GetPromptResult):
            return result
        return types.GetPromptResult(
            description=definition.description,
            messages=[
                types.PromptMessage(
                    role="user", content=types.TextContent(type="text", text=str(result))
                )
            ],
        )
