from __future__ import annotations

from pathlib import Path

from dagwood.scanner import find_pom_files


def test_finds_pom_files_and_skips_build_output(tmp_path: Path) -> None:
    for rel in ("pom.xml", "a/pom.xml", "b/lib-1.0.pom", "a/target/pom.xml", ".git/x.pom", "a/readme.txt"):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("<project/>", encoding="utf-8")

    found = find_pom_files(tmp_path)

    assert found == sorted([tmp_path / "pom.xml", tmp_path / "a/pom.xml", tmp_path / "b/lib-1.0.pom"])


def test_single_file_is_returned_as_is(tmp_path: Path) -> None:
    pom = tmp_path / "anything.xml"
    pom.write_text("<project/>", encoding="utf-8")

    assert find_pom_files(pom) == [pom]
