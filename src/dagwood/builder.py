"""Turn a parsed POM into dependency requests and a renderable tree."""

from __future__ import annotations

from dagwood.models import Dependency, DependencyNode, MavenProject


def convert_dependencies(project: MavenProject) -> list[Dependency]:
    """Return the project's direct dependencies in declaration order."""
    return [dep.model_copy(deep=True) for dep in project.dependencies]


def managed_dependencies(project: MavenProject) -> list[Dependency]:
    """Return `<dependencyManagement>` entries; these never become tree nodes."""
    return [dep.model_copy(deep=True) for dep in project.managed_dependencies]


def build_project_tree(project: MavenProject) -> DependencyNode:
    """Build a dependency-less root holding one leaf per direct dependency.

    Render it with `str(project.project)` as the formatter's fallback, the
    `groupId:artifactId:packaging:version` root label of `dependency:tree`.
    """
    root = DependencyNode()
    for dep in convert_dependencies(project):
        root.add(DependencyNode(dependency=dep))
    return root
