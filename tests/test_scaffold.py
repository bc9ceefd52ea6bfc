"""Unit tests for component scaffolding."""

from __future__ import annotations

from pathlib import Path

import pytest
from ruamel.yaml import YAML

from docs_preview.scaffold import ComponentScaffolder, start_case, write_if_missing


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("openzeppelin-contracts", "Openzeppelin Contracts"),
        ("my_lib", "My Lib"),
        ("fooBar", "Foo Bar"),
        ("XMLParser", "XML Parser"),
        ("cairo-v2", "Cairo V 2"),
    ],
)
def test_start_case(text: str, expected: str) -> None:
    assert start_case(text) == expected


def test_scaffolder_writes_component_layout(tmp_path: Path) -> None:
    component = tmp_path / "docs"
    written = ComponentScaffolder(component, name="my-lib", version="0.2").run()

    assert [p.relative_to(component).as_posix() for p in written] == [
        "antora.yml",
        "modules/ROOT/nav.adoc",
        "modules/ROOT/pages/index.adoc",
    ]
    manifest = YAML(typ="safe").load((component / "antora.yml").read_text(encoding="utf-8"))
    assert manifest == {
        "name": "my-lib",
        "title": "My Lib",
        "version": "0.2",
        "nav": ["modules/ROOT/nav.adoc"],
    }
    nav = (component / "modules/ROOT/nav.adoc").read_text(encoding="utf-8")
    assert nav == "* xref:index.adoc[Overview]\n"
    index = (component / "modules/ROOT/pages/index.adoc").read_text(encoding="utf-8")
    assert index == "= My Lib\n"


def test_scaffolder_is_idempotent(tmp_path: Path) -> None:
    component = tmp_path / "docs"
    ComponentScaffolder(component, name="my-lib", version="1.x").run()
    manifest = component / "antora.yml"
    manifest.write_text("name: custom\n", encoding="utf-8")

    written = ComponentScaffolder(component, name="my-lib", version="2.x").run()

    assert written == [], "expected no files to be rewritten on the second run"
    assert manifest.read_text(encoding="utf-8") == "name: custom\n"


def test_scaffolder_fills_in_missing_files_only(tmp_path: Path) -> None:
    component = tmp_path / "docs"
    component.mkdir()
    (component / "antora.yml").write_text("name: existing\n", encoding="utf-8")

    written = ComponentScaffolder(component, name="my-lib", version="1.x").run()

    assert component / "antora.yml" not in written
    assert (component / "modules/ROOT/pages/index.adoc").is_file()


def test_write_if_missing_reports_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    assert write_if_missing(target, "one") is True
    assert write_if_missing(target, "two") is False
    assert target.read_text(encoding="utf-8") == "one"
