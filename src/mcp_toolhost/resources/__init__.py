"""MCP resources: named read-only data exposed to the remote caller."""

from .registry import ResourceCapability, ResourceRegistry, resource

__all__ = ["ResourceCapability", "ResourceRegistry", "resource"]
