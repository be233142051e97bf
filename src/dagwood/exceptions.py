"""Custom exceptions for dagwood."""

from __future__ import annotations


class DagwoodError(Exception):
    """Base exception for dagwood."""


class PomNotFoundError(DagwoodError):
    """Raised when a pom.xml file cannot be found."""


class PomParseError(DagwoodError):
    """Raised when a pom.xml file cannot be parsed."""


class PomModelError(DagwoodError):
    """Raised when required Maven model fields are missing or invalid."""


class ArtifactCoordinateError(DagwoodError):
    """Raised when an artifact coordinate string cannot be parsed."""


class MalformedTreeError(DagwoodError):
    """Raised when a dependency tree contains a cycle."""


class TreeFileError(DagwoodError):
    """Raised when a serialized dependency tree cannot be read."""


class TreeRenderError(DagwoodError):
    """Raised when rendering a node fails.

    Attributes:
        depth: Depth of the failing node (the root is 0).
        path: Child indices leading from the root to the failing node.
    """

    def __init__(self, message: str, *, depth: int, path: tuple[int, ...]) -> None:
        super().__init__(message)
        self.depth = depth
        self.path = path
