"""MCP prompt templates."""

from .registry import PromptCapability, PromptRegistry, prompt

__all__ = ["PromptCapability", "PromptRegistry", "prompt"]
