"""Read and write resolved dependency trees as JSON.

Trees are stored flat, one record per node in pre-order with its depth, so
documents stay two levels deep however deep the dependency tree is:

    {"nodes": [
        {"depth": 0},
        {"depth": 1, "dependency": {"artifact": {...}, "scope": "compile"}},
        {"depth": 2, "dependency": {...}},
        {"depth": 1, "dependency": {...}}
    ]}
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from dagwood.exceptions import MalformedTreeError, TreeFileError
from dagwood.models import Dependency, DependencyNode


class TreeRecord(BaseModel):
    """One node of a flattened tree."""

    depth: int = Field(..., ge=0)
    dependency: Dependency | None = None


class TreeDocument(BaseModel):
    """A whole tree as pre-order records; the first record is the root."""

    nodes: list[TreeRecord] = Field(..., min_length=1)


def _preorder(root: DependencyNode) -> Iterator[tuple[int, DependencyNode]]:
    """Yield (depth, node) pairs keeping one child iterator per level."""
    yield 0, root
    path = [root]
    on_path = {id(root)}
    frames = [iter(root.children)]
    while frames:
        child = next(frames[-1], None)
        if child is None:
            frames.pop()
            on_path.discard(id(path.pop()))
            continue
        if id(child) in on_path:
            raise MalformedTreeError(f"Dependency tree contains a cycle at depth {len(path)}")
        yield len(path), child
        path.append(child)
        on_path.add(id(child))
        frames.append(iter(child.children))


def _build(document: TreeDocument, source: Path) -> DependencyNode:
    records = document.nodes
    if records[0].depth != 0:
        raise TreeFileError(f"Invalid dependency tree in {source}: first node must have depth 0")

    root = DependencyNode(dependency=records[0].dependency)
    path = [root]
    for index, record in enumerate(records[1:], start=1):
        if not 1 <= record.depth <= len(path):
            raise TreeFileError(
                f"Invalid dependency tree in {source}: node {index} has depth {record.depth}, "
                f"expected 1..{len(path)}"
            )
        del path[record.depth:]
        path.append(path[-1].add(DependencyNode(dependency=record.dependency)))
    return root


def load_tree(path: str | Path) -> DependencyNode:
    """Load a dependency tree from a JSON file written by `dump_tree`.

    Raises:
        TreeFileError: If the file is missing or does not hold a valid tree.
    """
    tree_path = Path(path)
    try:
        data = tree_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TreeFileError(f"Tree file not found: {tree_path}") from None
    except OSError as exc:
        raise TreeFileError(f"Failed to read tree file: {tree_path}") from exc

    try:
        document = TreeDocument.model_validate_json(data)
    except ValidationError as exc:
        raise TreeFileError(
            f"Invalid dependency tree in {tree_path}: {exc.error_count()} error(s)\n{exc}"
        ) from exc
    return _build(document, tree_path)


def dump_tree(root: DependencyNode, *, indent: int | None = 2) -> str:
    """Serialize a tree in the format accepted by `load_tree`.

    Raises:
        MalformedTreeError: If a node is its own ancestor.
        TreeFileError: If the tree cannot be serialized.
    """
    document = TreeDocument(
        nodes=[TreeRecord(depth=depth, dependency=node.dependency) for depth, node in _preorder(root)]
    )
    try:
        return document.model_dump_json(indent=indent, exclude_defaults=True)
    except PydanticSerializationError as exc:
        raise TreeFileError(f"Failed to serialize dependency tree: {exc}") from exc
