"""Pydantic models for Maven artifacts, dependencies and dependency trees."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dagwood.exceptions import ArtifactCoordinateError


UNKNOWN_VERSION = "Unknown"
DEFAULT_EXTENSION = "jar"

# Maven's default artifact type registry: type -> (extension, classifier).
ARTIFACT_TYPES: dict[str, tuple[str, str]] = {
    "pom": ("pom", ""),
    "jar": ("jar", ""),
    "maven-plugin": ("jar", ""),
    "ejb": ("jar", ""),
    "ejb-client": ("jar", "client"),
    "test-jar": ("jar", "tests"),
    "javadoc": ("jar", "javadoc"),
    "java-source": ("jar", "sources"),
    "war": ("war", ""),
    "ear": ("ear", ""),
    "rar": ("rar", ""),
    "par": ("par", ""),
}


def stereotype(type_name: str | None) -> tuple[str, str]:
    """Return the (extension, classifier) pair implied by a dependency `<type>`.

    Unknown types map to themselves with no classifier.
    """
    name = (type_name or DEFAULT_EXTENSION).strip() or DEFAULT_EXTENSION
    return ARTIFACT_TYPES.get(name, (name, ""))


class Artifact(BaseModel):
    """Maven coordinates including extension and classifier."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    extension: str = Field(default=DEFAULT_EXTENSION, min_length=1)
    classifier: str = ""
    version: str = Field(default=UNKNOWN_VERSION, min_length=1)

    @classmethod
    def parse(cls, coords: str) -> "Artifact":
        """Parse `<group>:<artifact>[:<extension>[:<classifier>]]:<version>`.

        Raises:
            ArtifactCoordinateError: If the string has the wrong number of parts
                or an empty mandatory part.
        """
        parts = (coords or "").strip().split(":")
        if len(parts) == 3:
            group_id, artifact_id, version = parts
            extension, classifier = DEFAULT_EXTENSION, ""
        elif len(parts) == 4:
            group_id, artifact_id, extension, version = parts
            classifier = ""
        elif len(parts) == 5:
            group_id, artifact_id, extension, classifier, version = parts
        else:
            raise ArtifactCoordinateError(
                f"Bad artifact coordinates {coords!r}, expected "
                "<groupId>:<artifactId>[:<extension>[:<classifier>]]:<version>"
            )

        if not (group_id and artifact_id and version):
            raise ArtifactCoordinateError(f"Bad artifact coordinates {coords!r}")

        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            extension=extension or DEFAULT_EXTENSION,
            classifier=classifier,
            version=version,
        )

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.extension]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


class Exclusion(BaseModel):
    """A transitive dependency exclusion (`*` matches anything)."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    artifact_id: str
    classifier: str = "*"
    extension: str = "*"


class Dependency(BaseModel):
    """A dependency on an artifact within a scope."""

    artifact: Artifact
    scope: str = ""
    optional: bool = False
    exclusions: list[Exclusion] = Field(default_factory=list)
    system_path: str | None = None

    def __str__(self) -> str:
        return f"{self.artifact} ({self.scope})"


class DependencyNode(BaseModel):
    """One vertex of a resolved dependency tree.

    `dependency` is only absent for a synthetic root. `children` keeps
    resolution order; two children may carry equal dependencies.
    """

    dependency: Dependency | None = None
    children: list[DependencyNode] = Field(default_factory=list)

    def add(self, child: DependencyNode) -> DependencyNode:
        """Append `child` and return it, for chained tree construction."""
        self.children.append(child)
        return child

    def count(self) -> int:
        """Return the number of nodes in this subtree (iteratively)."""
        total = 0
        pending = [self]
        while pending:
            node = pending.pop()
            total += 1
            pending.extend(node.children)
        return total


class MavenProject(BaseModel):
    """A parsed Maven project model.

    `project.extension` carries the packaging, so `str(project)` renders as
    `groupId:artifactId:packaging:version`.
    """

    project: Artifact
    dependencies: list[Dependency] = Field(default_factory=list)
    managed_dependencies: list[Dependency] = Field(default_factory=list)
