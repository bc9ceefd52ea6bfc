"""Scaffold the minimal file layout of a new Antora component.

``docs-preview init`` calls :class:`ComponentScaffolder` for every component
directory. It renders three Jinja templates (manifest, navigation, index page)
into the component and never overwrites a file that already exists, so the
command can be re-run safely.

Examples
--------
>>> from docs_preview.scaffold import start_case
>>> start_case("openzeppelin-contracts")
'Openzeppelin Contracts'
>>> start_case("fooBar_baz")
'Foo Bar Baz'
"""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import MANIFEST_FILENAME

_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")

ROOT_MODULE = Path("modules/ROOT")
PAGES_DIR = ROOT_MODULE / "pages"

_FILES: tuple[tuple[str, Path], ...] = (
    ("antora.yml.jinja", Path(MANIFEST_FILENAME)),
    ("nav.adoc.jinja", ROOT_MODULE / "nav.adoc"),
    ("index.adoc.jinja", PAGES_DIR / "index.adoc"),
)


def start_case(text: str) -> str:
    """Split ``text`` on separators and camel-case humps and capitalise each word."""
    words = _WORD_PATTERN.findall(text)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def write_if_missing(path: Path, contents: str) -> bool:
    """Create ``path`` with ``contents`` unless it exists; return True when written."""
    try:
        with path.open("x", encoding="utf-8") as handle:
            handle.write(contents)
    except FileExistsError:
        return False
    return True


class ComponentScaffolder:
    """Render the manifest, nav, and index stubs for one component."""

    def __init__(
        self,
        component_dir: Path,
        *,
        name: str,
        version: str,
        title: str | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.component_dir = component_dir
        self.name = name
        self.title = title or start_case(name)
        self.version = version
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(  # noqa: S701 - renders YAML/AsciiDoc, not HTML
            loader=FileSystemLoader(self.templates_dir),
            autoescape=False,
            keep_trailing_newline=True,
        )

    def run(self) -> list[Path]:
        """Write missing scaffold files and return the paths that were created."""
        (self.component_dir / PAGES_DIR).mkdir(parents=True, exist_ok=True)
        context = {"name": self.name, "title": self.title, "version": self.version}
        written: list[Path] = []
        for template_name, relative in _FILES:
            contents = self.env.get_template(template_name).render(**context)
            if not contents.endswith("\n"):
                contents += "\n"
            target = self.component_dir / relative
            if write_if_missing(target, contents):
                written.append(target)
        return written


__all__ = ["ComponentScaffolder", "start_case", "write_if_missing"]
