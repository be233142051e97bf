"""Read Maven pom.xml files with lxml."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping

from lxml import etree

from dagwood.exceptions import PomModelError, PomNotFoundError, PomParseError
from dagwood.models import (
    Artifact,
    Dependency,
    Exclusion,
    MavenProject,
    UNKNOWN_VERSION,
    stereotype,
)


logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_PROJECT = "/*[local-name()='project']"


def _child(name: str) -> str:
    return f"./*[local-name()='{name}']"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Return the stripped text of the first XPath match, or None when empty."""
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        first = first.text or ""
    if isinstance(first, str):
        return first.strip() or None
    return None


def _bool_text(value: str | None) -> bool:
    """Maven booleans: only a literal "true" (any case) counts as true."""
    return (value or "").strip().lower() == "true"


def _parse_xml(path: Path) -> etree._Element:
    """Parse an XML file and return its root element.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If XML cannot be parsed.
    """
    if not path.exists():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        return etree.parse(str(path), parser=parser).getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise PomParseError(f"Failed to parse pom.xml: {path}") from exc


def _resolve_placeholders(value: str, props: Mapping[str, str]) -> str:
    """Resolve ${...} placeholders, following nested references a few levels deep.

    Unknown placeholders are preserved as-is.
    """
    current = value
    for _ in range(5):
        nxt = _PLACEHOLDER_RE.sub(lambda m: props.get(m.group(1)) or m.group(0), current)
        if nxt == current:
            break
        current = nxt
    return current


def _normalize_version(value: str | None, props: Mapping[str, str]) -> str:
    """Resolve a version; missing or still-unresolved versions become "Unknown"."""
    if value is None:
        return UNKNOWN_VERSION
    resolved = _resolve_placeholders(value, props).strip()
    if not resolved or _PLACEHOLDER_RE.search(resolved):
        return UNKNOWN_VERSION
    return resolved


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    for n in root.xpath(f"{_PROJECT}/*[local-name()='properties']/*"):
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


def _parse_exclusion(node: etree._Element, props: Mapping[str, str]) -> Exclusion | None:
    group_id = _text_first(node, _child("groupId"))
    artifact_id = _text_first(node, _child("artifactId"))
    if group_id is None or artifact_id is None:
        return None
    return Exclusion(
        group_id=_resolve_placeholders(group_id, props),
        artifact_id=_resolve_placeholders(artifact_id, props),
    )


def _parse_dependency(node: etree._Element, props: Mapping[str, str]) -> Dependency | None:
    """Convert one `<dependency>` element; entries without coordinates are skipped."""
    group_id = _text_first(node, _child("groupId"))
    artifact_id = _text_first(node, _child("artifactId"))
    if group_id is None or artifact_id is None:
        logger.warning("Skipping <dependency> without groupId/artifactId")
        return None

    extension, implied_classifier = stereotype(_text_first(node, _child("type")))
    classifier = _text_first(node, _child("classifier"))

    exclusions = [
        excl
        for excl in (
            _parse_exclusion(e, props)
            for e in node.xpath(f"{_child('exclusions')}/*[local-name()='exclusion']")
        )
        if excl is not None
    ]

    return Dependency(
        artifact=Artifact(
            group_id=_resolve_placeholders(group_id, props),
            artifact_id=_resolve_placeholders(artifact_id, props),
            extension=extension,
            classifier=_resolve_placeholders(classifier, props) if classifier else implied_classifier,
            version=_normalize_version(_text_first(node, _child("version")), props),
        ),
        scope=_text_first(node, _child("scope")) or "",
        optional=_bool_text(_text_first(node, _child("optional"))),
        exclusions=exclusions,
        system_path=_text_first(node, _child("systemPath")),
    )


def _parse_dependencies(root: etree._Element, xpath_expr: str, props: Mapping[str, str]) -> list[Dependency]:
    deps = (_parse_dependency(n, props) for n in root.xpath(xpath_expr))
    return [d for d in deps if d is not None]


def parse_pom(path: str | Path) -> MavenProject:
    """Parse a Maven pom.xml into its project coordinates and declared dependencies.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - groupId and version fall back to the `<parent>` section.
        - Property placeholders like `${...}` are resolved when possible.
          If a version cannot be resolved, it is stored as "Unknown".
        - `<dependencyManagement>` entries are kept apart from direct dependencies.

    Raises:
        PomModelError: If required fields are missing.
    """
    pom_path = Path(path)
    root = _parse_xml(pom_path)

    raw_group_id = _text_first(root, f"{_PROJECT}/*[local-name()='groupId']")
    raw_artifact_id = _text_first(root, f"{_PROJECT}/*[local-name()='artifactId']")
    raw_version = _text_first(root, f"{_PROJECT}/*[local-name()='version']")
    packaging = _text_first(root, f"{_PROJECT}/*[local-name()='packaging']") or "jar"

    parent = f"{_PROJECT}/*[local-name()='parent']"
    raw_group_id = raw_group_id or _text_first(root, f"{parent}/*[local-name()='groupId']")
    raw_version = raw_version or _text_first(root, f"{parent}/*[local-name()='version']")

    if raw_artifact_id is None:
        raise PomModelError(f"Missing required <artifactId> in {pom_path}")
    if raw_group_id is None:
        raise PomModelError(f"Missing required <groupId> (or parent <groupId>) in {pom_path}")

    effective_version = raw_version or UNKNOWN_VERSION
    builtins: dict[str, str] = {}
    for prefix in ("project.", "pom.", ""):
        builtins[f"{prefix}groupId"] = raw_group_id
        builtins[f"{prefix}artifactId"] = raw_artifact_id
        builtins[f"{prefix}version"] = effective_version
    props = {**_parse_properties(root), **builtins}

    project = Artifact(
        group_id=_resolve_placeholders(raw_group_id, props),
        artifact_id=raw_artifact_id,
        extension=packaging,
        version=_normalize_version(effective_version, props),
    )

    dependencies = _parse_dependencies(
        root, f"{_PROJECT}/*[local-name()='dependencies']/*[local-name()='dependency']", props
    )
    managed = _parse_dependencies(
        root,
        f"{_PROJECT}/*[local-name()='dependencyManagement']"
        "/*[local-name()='dependencies']/*[local-name()='dependency']",
        props,
    )
    logger.debug(
        "Parsed %s: %d dependency(ies), %d managed", pom_path, len(dependencies), len(managed)
    )

    return MavenProject(project=project, dependencies=dependencies, managed_dependencies=managed)
