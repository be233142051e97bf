"""Pytest configuration and fixtures for dagwood tests."""
from __future__ import annotations

from collections.abc import Callable

import pytest

from dagwood.formatter import DefaultNodeFormatter
from dagwood.models import Artifact, Dependency, DependencyNode
from dagwood.renderer import TreeRenderer
from dagwood.tokens import STANDARD_TOKENS


def create_node(coords: str, scope: str = "", optional: bool = False) -> DependencyNode:
    return DependencyNode(
        dependency=Dependency(artifact=Artifact.parse(coords), scope=scope, optional=optional)
    )


@pytest.fixture
def node() -> Callable[..., DependencyNode]:
    return create_node


@pytest.fixture
def serializer() -> TreeRenderer:
    """Standard tokens with the "dagwood" fallback label."""
    return TreeRenderer(STANDARD_TOKENS, DefaultNodeFormatter("dagwood"))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DAGWOOD_TOKENS", "DAGWOOD_FALLBACK", "DAGWOOD_SHOW_OPTIONAL", "DAGWOOD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
