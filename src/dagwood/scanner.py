from __future__ import annotations

from pathlib import Path


_SKIPPED_DIRS = {"target"}


def is_pom_file(path: Path) -> bool:
    name = path.name.lower()
    return name == "pom.xml" or name.endswith(".pom")


def find_pom_files(root: Path) -> list[Path]:
    """Find Maven POM files under root (pom.xml and *.pom).

    Build output (`target/`) and hidden directories are not searched.

    Args:
        root: A directory to scan recursively, or a single pom file.

    Returns:
        Sorted unique list of POM files.
    """
    if root.is_file():
        return [root]

    poms: set[Path] = set()
    for p in root.rglob("*"):
        rel_dirs = p.relative_to(root).parts[:-1]
        if any(d in _SKIPPED_DIRS or d.startswith(".") for d in rel_dirs):
            continue
        if p.is_file() and is_pom_file(p):
            poms.add(p)
    return sorted(poms)
