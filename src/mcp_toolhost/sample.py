"""Sample capabilities: a greeting, an echo and a tiny in-memory note store.

Used by the command-line server and by the integration tests.
"""

from __future__ import annotations

import json

from mcp import types
from pydantic import BaseModel, Field

from .prompts import PromptCapability, prompt
from .resources import ResourceCapability, resource
from .tools import ToolCapability, tool

NOTES_URI = "memo://notes"


class NoteStore:
    """Notes keyed by title."""

    def __init__(self) -> None:
        self._notes: dict[str, str] = {}

    def add(self, title: str, body: str) -> None:
        self._notes[title] = body

    def delete(self, title: str) -> bool:
        return self._notes.pop(title, None) is not None

    def all(self) -> dict[str, str]:
        return dict(self._notes)


class EchoInput(BaseModel):
    message: str = Field(description="Text to send back")


class AddNoteInput(BaseModel):
    title: str = Field(min_length=1, description="Unique note title")
    body: str = Field(default="", description="Note contents")


class DeleteNoteInput(BaseModel):
    title: str = Field(min_length=1, description="Title of the note to delete")


def sample_tools(store: NoteStore) -> list[ToolCapability]:
    """Tools bound to ``store``: two read-only, two that write."""

    @tool(
        annotations=types.ToolAnnotations(
            title="Hello World Tool",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
    )
    def hello_world(_: BaseModel) -> str:
        """Returns a Hello World greeting."""
        return "Hello, World!"

    @tool(
        input_model=EchoInput,
        annotations=types.ToolAnnotations(title="Echo", readOnlyHint=True, idempotentHint=True),
    )
    async def echo(params: EchoInput) -> str:
        """Echo a message back to the caller."""
        return params.message

    @tool(
        input_model=AddNoteInput,
        annotations=types.ToolAnnotations(
            title="Add Note", readOnlyHint=False, destructiveHint=False, idempotentHint=True
        ),
    )
    def add_note(params: AddNoteInput) -> dict[str, str]:
        """Create or overwrite a note."""
        store.add(params.title, params.body)
        return {"status": "ok", "title": params.title}

    @tool(
        input_model=DeleteNoteInput,
        annotations=types.ToolAnnotations(
            title="Delete Note", readOnlyHint=False, destructiveHint=True, idempotentHint=True
        ),
    )
    def delete_note(params: DeleteNoteInput) -> dict[str, object]:
        """Delete a note by title."""
        return {"title": params.title, "deleted": store.delete(params.title)}

    return [hello_world, echo, add_note, delete_note]


def sample_resources(store: NoteStore) -> list[ResourceCapability]:
    @resource(NOTES_URI, name="notes", mime_type="application/json")
    def notes(uri: str) -> str:
        """All notes as a JSON object keyed by title."""
        return json.dumps(store.all(), indent=2)

    return [notes]


def sample_prompts(store: NoteStore) -> list[PromptCapability]:
    @prompt(
        arguments=[
            types.PromptArgument(
                name="style", description="Summary style, e.g. 'bullets'", required=False
            )
        ],
    )
    def summarize_notes(arguments: dict[str, str]) -> str:
        """Ask for a summary of every stored note."""
        style = arguments.get("style", "a short paragraph")
        notes = store.all()
        if not notes:
            return "There are no notes yet. Use add_note to create one first."
        listing = "\n".join(f"- {title}: {body}" for title, body in notes.items())
        return f"Summarize the following notes as {style}:\n\n{listing}"

    return [summarize_notes]
