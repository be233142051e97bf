from __future__ import annotations

from pathlib import Path

import pytest

from dagwood.builder import build_project_tree, convert_dependencies, managed_dependencies
from dagwood.exceptions import PomModelError, PomNotFoundError, PomParseError
from dagwood.models import MavenProject
from dagwood.parser import parse_pom
from dagwood.renderer import TreeRenderer
from dagwood.formatter import DefaultNodeFormatter
from dagwood.tokens import STANDARD_TOKENS


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_pom_without_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
      <version>2.0.12</version>
      <scope>compile</scope>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert isinstance(model, MavenProject)
    assert str(model.project) == "com.acme:demo:jar:1.0.0"
    assert len(model.dependencies) == 1
    dep = model.dependencies[0]
    assert str(dep.artifact) == "org.slf4j:slf4j-api:jar:2.0.12"
    assert dep.scope == "compile"
    assert dep.optional is False


def test_parse_pom_with_namespace_packaging_and_types(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>web</artifactId>
  <version>1.0.0</version>
  <packaging>war</packaging>

  <dependencies>
    <dependency>
      <groupId>com.acme</groupId>
      <artifactId>core</artifactId>
      <version>1.0.0</version>
      <type>test-jar</type>
      <scope>test</scope>
    </dependency>
    <dependency>
      <groupId>com.acme</groupId>
      <artifactId>native</artifactId>
      <version>1.0.0</version>
      <classifier>linux-x86_64</classifier>
      <optional>TRUE</optional>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert str(model.project) == "com.acme:web:war:1.0.0"
    test_jar, native = model.dependencies
    assert str(test_jar.artifact) == "com.acme:core:jar:tests:1.0.0"
    assert test_jar.scope == "test"
    assert str(native.artifact) == "com.acme:native:jar:linux-x86_64:1.0.0"
    assert native.scope == ""
    assert native.optional is True


def test_exclusions_and_system_path(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1</version>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>2</version>
      <scope>system</scope>
      <systemPath>/opt/lib.jar</systemPath>
      <exclusions>
        <exclusion>
          <groupId>commons-logging</groupId>
          <artifactId>commons-logging</artifactId>
        </exclusion>
      </exclusions>
    </dependency>
  </dependencies>
</project>
"""
    dep = parse_pom(_write(tmp_path, "pom.xml", pom)).dependencies[0]

    assert dep.system_path == "/opt/lib.jar"
    assert len(dep.exclusions) == 1
    excl = dep.exclusions[0]
    assert (excl.group_id, excl.artifact_id, excl.classifier, excl.extension) == (
        "commons-logging",
        "commons-logging",
        "*",
        "*",
    )


def test_unresolved_placeholder_version_becomes_unknown(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.project.version == "Unknown"
    assert model.dependencies[0].artifact.version == "Unknown"


def test_resolve_properties_for_dependency_version(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <properties>
    <lib.major>2</lib.major>
    <lib.version>${lib.major}.3.4</lib.version>
  </properties>
  <dependencies>
    <dependency>
      <groupId>${project.groupId}</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
    <dependency>
      <groupId>com.acme</groupId>
      <artifactId>sibling</artifactId>
      <version>${project.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert [d.artifact.compact() for d in model.dependencies] == [
        "com.acme:lib:2.3.4",
        "com.acme:sibling:1.0.0",
    ]


def test_inherit_group_and_version_from_parent(tmp_path: Path) -> None:
    pom = """<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>9.9.9</version>
  </parent>
  <artifactId>child</artifactId>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.project.compact() == "com.acme:child:9.9.9"


def test_dependency_management_is_kept_apart(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>bom</artifactId>
  <version>1</version>
  <packaging>pom</packaging>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>junit</groupId>
        <artifactId>junit</artifactId>
        <version>4.13.2</version>
      </dependency>
    </dependencies>
  </dependencyManagement>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert convert_dependencies(model) == []
    assert [str(d.artifact) for d in managed_dependencies(model)] == ["junit:junit:jar:4.13.2"]
    assert build_project_tree(model).children == []


def test_dependency_without_coordinates_is_skipped(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>g</groupId>
  <artifactId>a</artifactId>
  <version>1</version>
  <dependencies>
    <dependency><artifactId>nogroup</artifactId></dependency>
    <dependency><groupId>x</groupId><artifactId>y</artifactId><version>1</version></dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert [d.artifact.artifact_id for d in model.dependencies] == ["y"]


def test_project_tree_renders_like_dependency_tree(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>app</artifactId>
  <version>1.0</version>
  <dependencies>
    <dependency><groupId>a</groupId><artifactId>a</artifactId><version>1</version></dependency>
    <dependency>
      <groupId>b</groupId><artifactId>b</artifactId><version>2</version><scope>test</scope>
    </dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))
    renderer = TreeRenderer(STANDARD_TOKENS, DefaultNodeFormatter(str(model.project)))

    assert renderer.render(build_project_tree(model)) == (
        "com.acme:app:jar:1.0\n"
        "+- a:a:jar:1\n"
        "\\- b:b:jar:2:test\n"
    )


def test_missing_artifact_id(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><groupId>g</groupId></project>")

    with pytest.raises(PomModelError, match="artifactId"):
        parse_pom(path)


def test_missing_group_id(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><artifactId>a</artifactId></project>")

    with pytest.raises(PomModelError, match="groupId"):
        parse_pom(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PomNotFoundError):
        parse_pom(tmp_path / "nope.xml")


def test_broken_xml(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><groupId>g</project>")

    with pytest.raises(PomParseError):
        parse_pom(path)
