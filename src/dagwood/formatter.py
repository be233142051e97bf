"""Node label strategies for dependency tree rendering."""

from __future__ import annotations

from typing import Protocol

from dagwood.models import DependencyNode


DEFAULT_FALLBACK = "null"


class NodeFormatter(Protocol):
    """Turns a single node into its label. Must not depend on traversal state."""

    def format(self, node: DependencyNode) -> str: ...


class DefaultNodeFormatter:
    """Format tree items as `dependency:tree` does.

    A node without a dependency (a synthetic root) is labelled with `fallback`.
    Otherwise the label is the artifact id followed by `:scope` when the scope
    is non-empty.
    """

    def __init__(self, fallback: str = DEFAULT_FALLBACK) -> None:
        self.fallback = fallback

    def format(self, node: DependencyNode) -> str:
        dependency = node.dependency
        if dependency is None:
            return self.fallback
        formatted = str(dependency.artifact)
        if dependency.scope:
            formatted += f":{dependency.scope}"
        return formatted


class VerboseNodeFormatter(DefaultNodeFormatter):
    """Default label plus an ` (optional)` marker for optional dependencies."""

    def format(self, node: DependencyNode) -> str:
        formatted = super().format(node)
        if node.dependency is not None and node.dependency.optional:
            formatted += " (optional)"
        return formatted
