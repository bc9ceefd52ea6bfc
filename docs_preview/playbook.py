"""Assemble the local Antora playbook used for preview builds.

The shared docs repository ships a ``playbook.yml`` describing the production
site. :func:`assemble_playbook` loads it, swaps its content sources for the
caller's local components, points the site start page at the first component,
and writes the result to ``local-playbook.yml`` in the cache directory.

Only three fields of the playbook are modelled by :class:`Playbook`:
``content.sources``, ``site.start_page``, and ``urls.html_extension_style``.
Everything else is round-tripped untouched.

Examples
--------
>>> from pathlib import Path
>>> from docs_preview.playbook import ContentSource
>>> ContentSource.for_component(Path("/repo"), Path("/repo/docs")).as_mapping()
{'url': '/repo', 'start_path': 'docs', 'branches': 'HEAD'}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from ._constants import CONTENT_BRANCHES, HTML_EXTENSION_STYLE
from .errors import NotInRepositoryError, PlaybookError
from .manifest import ComponentManifest, build_roundtrip_yaml, load_manifest

if typ.TYPE_CHECKING:
    from .settings import PreviewSettings

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ContentSource:
    """One ``content.sources`` entry pointing Antora at a local component."""

    url: str
    start_path: str
    branches: str = CONTENT_BRANCHES

    @classmethod
    def for_component(cls, repo_root: Path, component_dir: Path) -> ContentSource:
        start_path = Path(os.path.relpath(component_dir, repo_root)).as_posix()
        if start_path == ".":
            start_path = ""
        return cls(url=str(repo_root), start_path=start_path)

    def as_mapping(self) -> dict[str, str]:
        return {"url": self.url, "start_path": self.start_path, "branches": self.branches}


def find_repository_root(start: Path) -> Path | None:
    """Return the nearest directory at or above ``start`` holding a ``.git`` dir."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").is_dir():
            return candidate
    return None


class Playbook:
    """Typed view over the handful of playbook fields this tool rewrites."""

    def __init__(self, document: CommentedMap) -> None:
        self.document = document

    @classmethod
    def load(cls, path: Path) -> Playbook:
        if not path.is_file():
            msg = (
                f"Base playbook '{path}' not found; "
                "is the docs repository checked out?"
            )
            raise PlaybookError(msg)
        yaml = build_roundtrip_yaml()
        try:
            with path.open("r", encoding="utf-8") as handle:
                document = yaml.load(handle)
        except YAMLError as exc:
            msg = f"Base playbook '{path}' is not valid YAML: {exc}"
            raise PlaybookError(msg) from exc
        if not isinstance(document, CommentedMap):
            msg = f"Base playbook '{path}' must be a mapping."
            raise PlaybookError(msg)
        return cls(document)

    def _section(self, key: str) -> CommentedMap:
        section = self.document.get(key)
        if not isinstance(section, cabc.MutableMapping):
            section = CommentedMap()
            self.document[key] = section
        return typ.cast("CommentedMap", section)

    @property
    def sources(self) -> list[dict[str, typ.Any]]:
        raw = self.document.get("content", {}) or {}
        return list(raw.get("sources") or [])

    @sources.setter
    def sources(self, value: cabc.Iterable[ContentSource]) -> None:
        self._section("content")["sources"] = [source.as_mapping() for source in value]

    @property
    def start_page(self) -> str | None:
        site = self.document.get("site") or {}
        return site.get("start_page")

    @start_page.setter
    def start_page(self, value: str) -> None:
        self._section("site")["start_page"] = value

    def normalize_url_style(self) -> None:
        """Drop implicit ``.html`` handling when the playbook configures URLs."""
        urls = self.document.get("urls")
        if isinstance(urls, cabc.MutableMapping):
            urls["html_extension_style"] = HTML_EXTENSION_STYLE

    def write(self, path: Path) -> Path:
        yaml = build_roundtrip_yaml()
        with path.open("w", encoding="utf-8") as handle:
            yaml.dump(self.document, handle)
        return path


def content_sources(
    repo_root: Path, component_dirs: cabc.Iterable[Path]
) -> list[ContentSource]:
    return [ContentSource.for_component(repo_root, path) for path in component_dirs]


def assemble_playbook(settings: PreviewSettings) -> Path:
    """Write the local playbook for ``settings`` and return its path.

    Raises
    ------
    ManifestError
        If any component directory lacks a readable ``antora.yml``.
    NotInRepositoryError
        If the invocation directory is not inside a git checkout.
    PlaybookError
        If the docs repository has no usable ``playbook.yml``.
    """
    component_dirs = [settings.component_path(path) for path in settings.component_dirs]
    manifests: list[ComponentManifest] = [load_manifest(path) for path in component_dirs]

    repo_root = find_repository_root(settings.cwd)
    if repo_root is None:
        msg = f"Must be inside a git repository (searched upward from {settings.cwd})."
        raise NotInRepositoryError(msg)

    playbook = Playbook.load(settings.base_playbook)
    playbook.sources = content_sources(repo_root, component_dirs)
    playbook.start_page = manifests[0].start_page_ref
    playbook.normalize_url_style()

    output = playbook.write(settings.local_playbook)
    logger.debug("wrote playbook %s with %d source(s)", output, len(component_dirs))
    return output


__all__ = [
    "ContentSource",
    "Playbook",
    "assemble_playbook",
    "content_sources",
    "find_repository_root",
]
