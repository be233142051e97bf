"""Typer CLI entry point for dagwood."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dagwood.builder import build_project_tree
from dagwood.config import RenderConfig
from dagwood.exceptions import DagwoodError, PomNotFoundError
from dagwood.graph import build_graph, default_root, project_artifact, tree_from_graph
from dagwood.loader import dump_tree, load_tree
from dagwood.models import Artifact, Dependency, DependencyNode, MavenProject
from dagwood.parser import parse_pom
from dagwood.scanner import find_pom_files
from dagwood.tokens import TokenStyle

app = typer.Typer(add_completion=False, help="Print Maven dependency trees.")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _parse_all(pom_files: list[Path]) -> list[MavenProject]:
    projects = []
    for p in pom_files:
        try:
            projects.append(parse_pom(p))
        except DagwoodError as exc:
            logger.warning("Skipped %s: %s", p, exc)
    return projects


def _load_input(path: Path, root_id: str | None) -> tuple[DependencyNode, Artifact | None]:
    """Load a tree from a JSON file, a single POM, or a folder of POMs.

    Returns:
        The tree and, for POM input, the root project whose coordinates label
        the artifact-less root. JSON trees use the configured fallback.
    """
    if root_id is not None and not path.is_dir():
        raise DagwoodError("--root only applies when PATH is a folder of POMs")

    if path.suffix.lower() == ".json":
        return load_tree(path), None

    if path.is_file():
        project = parse_pom(path)
        return build_project_tree(project), project.project

    if not path.is_dir():
        raise PomNotFoundError(f"No such file or directory: {path}")

    pom_files = find_pom_files(path)
    if not pom_files:
        raise PomNotFoundError(f"No POM files found under {path}")
    projects = _parse_all(pom_files)
    if not projects:
        raise DagwoodError(f"No readable POM files under {path}")

    g = build_graph(projects)
    root = root_id or default_root(g)
    logger.info("Rendering %s from %d project(s)", root, len(projects))
    return tree_from_graph(g, root), project_artifact(g, root)


@app.command()
def tree(
    path: Annotated[
        Path,
        typer.Argument(help="A resolved tree (.json), a POM file, or a folder of POMs."),
    ],
    root: Annotated[
        Optional[str],
        typer.Option("--root", help="Root project GAV; only valid when PATH is a folder."),
    ] = None,
    tokens: Annotated[
        Optional[TokenStyle],
        typer.Option("--tokens", case_sensitive=False, help="Connector style."),
    ] = None,
    fallback: Annotated[
        Optional[str],
        typer.Option("--fallback", help="Label for a root without an artifact."),
    ] = None,
    show_optional: Annotated[
        bool, typer.Option("--show-optional", help="Mark optional dependencies.")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Print a dependency tree the way `mvn dependency:tree` does."""
    try:
        config = RenderConfig.from_env()
        if verbose:
            config.log_level = "DEBUG"
        config.validate()
        _setup_logging(config.logging_level)

        node, project = _load_input(path, root)

        if tokens is not None:
            config.token_style = tokens.value
        if fallback is not None:
            config.fallback = fallback
        elif project is not None:
            config.fallback = str(project)
        config.show_optional = config.show_optional or show_optional

        renderer = config.create_renderer()
        for line in renderer.iter_lines(node):
            console.print(line, markup=False, emoji=False, highlight=False, soft_wrap=True)
    except (DagwoodError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None


@app.command()
def export(
    path: Annotated[Path, typer.Argument(help="A POM file or a folder of POMs.")],
    root: Annotated[
        Optional[str],
        typer.Option("--root", help="Root project GAV; only valid when PATH is a folder."),
    ] = None,
) -> None:
    """Print the tree as JSON, readable back with `dagwood tree FILE.json`."""
    try:
        config = RenderConfig.from_env()
        config.validate()
        _setup_logging(config.logging_level)

        node, project = _load_input(path, root)
        if project is not None and node.dependency is None:
            node.dependency = Dependency(artifact=project)
        console.print(dump_tree(node), markup=False, emoji=False, highlight=False, soft_wrap=True)
    except (DagwoodError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None


def main() -> None:
    """Console-script entry point."""
    app()
