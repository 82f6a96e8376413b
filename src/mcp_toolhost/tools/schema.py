"""Input shapes for tools: runtime validation and JSON Schema advertisement.

A tool's input shape is a pydantic model class. ``model_validate`` is the
runtime validator; ``render_input_schema`` produces the self-contained JSON
Schema that ``tools/list`` advertises.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ValidationError


class EmptyInput(BaseModel):
    """Input model for tools that take no arguments."""


class _RecursiveSchema(Exception):
    pass


def _inline_refs(node: Any, defs: dict[str, Any], stack: tuple[str, ...]) -> Any:
    if isinstance(node, list):
        return [_inline_refs(item, defs, stack) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith("#/$defs/"):
        def_name = ref.removeprefix("#/$defs/")
        if def_name in stack:
            raise _RecursiveSchema(def_name)
        target = copy.deepcopy(defs[def_name])
        # Sibling keywords (description, default) override the referenced definition
        target.update({k: v for k, v in node.items() if k != "$ref"})
        return _inline_refs(target, defs, (*stack, def_name))

    return {key: _inline_refs(value, defs, stack) for key, value in node.items()}


def render_input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Render a model as a JSON Schema object with ``$ref`` pointers inlined.

    Recursive models cannot be inlined; their schema is returned with
    ``$defs`` intact.
    """
    schema = model.model_json_schema()
    defs = schema.pop("$defs", None)
    if not defs:
        return schema
    try:
        return _inline_refs(schema, defs, ())  # type: ignore[no-any-return]
    except _RecursiveSchema:
        return model.model_json_schema()


def format_validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic ``ValidationError`` into JSON-safe diagnostics."""
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "<root>",
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def summarize_validation_errors(errors: list[dict[str, Any]]) -> str:
    """One-line summary of flattened diagnostics."""
    return "; ".join(f"{e['field']}: {e['message']}" for e in errors)
