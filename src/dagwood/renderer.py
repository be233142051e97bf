"""Serialize a dependency tree into `dependency:tree` style text lines.

The renderer walks the tree in pre-order with an explicit stack holding one
child iterator per level: deep trees never hit the interpreter's recursion
limit, and memory follows the depth of the current path, not the tree's width.
For each visited node it keeps one "is last among its siblings" flag per level
of the current path; the prefix of a line is assembled from those flags:

    g:p:t:1              depth 0, no prefix
    +- g:a:t:1           node_indent (not last)
    |  \\- g:b:t:1        fill_indent for level 1, then last_node_indent
    \\- g:c:t:1
       \\- g:d:t:1        last_fill_indent for level 1, then last_node_indent

Sibling position comes from the index in the parent's `children`, so two
siblings carrying equal dependencies are never confused.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TextIO

from dagwood.exceptions import MalformedTreeError, TreeRenderError
from dagwood.formatter import DefaultNodeFormatter, NodeFormatter
from dagwood.models import DependencyNode
from dagwood.tokens import WHITESPACE_TOKENS, TreeTokens


logger = logging.getLogger(__name__)


class _Traversal:
    """State of one render: the path from the root to the current node."""

    def __init__(self) -> None:
        self.nodes: list[DependencyNode] = []
        self.last: list[bool] = []
        self.positions: list[int] = []
        self.on_path: set[int] = set()

    @property
    def depth(self) -> int:
        return len(self.nodes)

    def enter(self, node: DependencyNode, position: int, last: bool) -> None:
        if id(node) in self.on_path:
            raise MalformedTreeError(
                f"Dependency tree contains a cycle: node at {_describe(self.positions + [position])} "
                "is its own ancestor"
            )
        self.nodes.append(node)
        self.last.append(last)
        self.positions.append(position)
        self.on_path.add(id(node))

    def leave(self) -> None:
        node = self.nodes.pop()
        self.last.pop()
        self.positions.pop()
        self.on_path.discard(id(node))


def _describe(positions: list[int]) -> str:
    # The root's own position is not part of the path.
    path = positions[1:]
    if not path:
        return "root"
    return f"depth {len(path)}, path {'/'.join(str(p) for p in path)}"


class TreeRenderer:
    """Renders dependency trees with a token table and a node formatter.

    Args:
        tokens: Connector tokens; whitespace tokens by default.
        formatter: Label strategy; `DefaultNodeFormatter()` by default.

    A renderer holds no per-render state, so one instance may render
    different trees from several threads.
    """

    def __init__(
        self,
        tokens: TreeTokens = WHITESPACE_TOKENS,
        formatter: NodeFormatter | None = None,
    ) -> None:
        self.tokens = tokens
        self.formatter = formatter if formatter is not None else DefaultNodeFormatter()

    def iter_lines(self, root: DependencyNode) -> Iterator[str]:
        """Yield one line (without line terminator) per node, in pre-order.

        Raises:
            MalformedTreeError: If a node is reached again below itself.
            TreeRenderError: If the formatter fails on a node.
        """
        state = _Traversal()
        state.enter(root, 0, True)
        yield self._format(root, state)
        visited = 1

        # One child iterator per level of the current path.
        frames: list[Iterator[tuple[int, DependencyNode]]] = [iter(enumerate(root.children))]
        while frames:
            entry = next(frames[-1], None)
            if entry is None:
                frames.pop()
                state.leave()
                continue

            index, node = entry
            last = index == len(state.nodes[-1].children) - 1
            state.enter(node, index, last)
            yield self._indent(state) + self._format(node, state)
            visited += 1
            frames.append(iter(enumerate(node.children)))

        logger.debug("Rendered %d node(s)", visited)

    def render_lines(self, root: DependencyNode) -> list[str]:
        return list(self.iter_lines(root))

    def render(self, root: DependencyNode) -> str:
        """Render the whole tree; every line, including the last, ends with a newline."""
        return "".join(f"{line}\n" for line in self.iter_lines(root))

    def write(self, root: DependencyNode, out: TextIO) -> int:
        """Stream the rendered tree to `out`, returning the number of lines written."""
        count = 0
        for line in self.iter_lines(root):
            out.write(f"{line}\n")
            count += 1
        return count

    def _indent(self, state: _Traversal) -> str:
        depth = state.depth - 1
        if depth == 0:
            return ""
        parts = [self.tokens.fill(state.last[level]) for level in range(1, depth)]
        parts.append(self.tokens.node(state.last[depth]))
        return "".join(parts)

    def _format(self, node: DependencyNode, state: _Traversal) -> str:
        try:
            return self.formatter.format(node)
        except Exception as exc:
            path = tuple(state.positions[1:])
            raise TreeRenderError(
                f"Failed to format node at {_describe(state.positions)}: {exc}",
                depth=len(path),
                path=path,
            ) from exc


def render_tree(
    root: DependencyNode,
    tokens: TreeTokens = WHITESPACE_TOKENS,
    formatter: NodeFormatter | None = None,
) -> str:
    """Convenience wrapper around `TreeRenderer(tokens, formatter).render(root)`."""
    return TreeRenderer(tokens, formatter).render(root)
