"""Shared fixtures for docs_preview tests.

The fixtures lay out a fake project on disk: a git root (a bare ``.git``
directory is enough for root discovery), a component with ``antora.yml``, and
a cache directory holding the docs repository's base ``playbook.yml``. No real
``git`` or ``npm`` processes are started by any test.
"""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path
from textwrap import dedent

import pytest

from docs_preview.settings import PreviewSettings, resolve_cache_dir

BASE_PLAYBOOK = dedent(
    """
    # Production playbook for the shared docs site.
    site:
      title: Shared Docs
      url: https://docs.example.invalid
      start_page: home::index.adoc
    content:
      sources:
        - url: https://github.com/example/home.git
          branches: master
          start_path: components/home
    ui:
      bundle:
        url: ./build/ui.zip
    urls:
      html_extension_style: indexify
    """
).lstrip()


def write_manifest(component_dir: Path, body: str) -> Path:
    component_dir.mkdir(parents=True, exist_ok=True)
    path = component_dir / "antora.yml"
    path.write_text(dedent(body).lstrip(), encoding="utf-8")
    return path


@dc.dataclass(slots=True)
class Project:
    """Paths of a fake project prepared for a test."""

    repo_root: Path
    cwd: Path
    cache_root: Path
    cache_dir: Path

    def settings(self, *components: str, **overrides: object) -> PreviewSettings:
        return PreviewSettings.create(
            cwd=self.cwd,
            cache_root=self.cache_root,
            component_dirs=[Path(c) for c in components],
            **overrides,
        )


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Project:
    """Create a git root with a ``docs`` component and a synced cache dir."""
    repo_root = tmp_path / "repo"
    (repo_root / ".git").mkdir(parents=True)
    write_manifest(
        repo_root / "docs",
        """
        name: contracts
        title: Contracts
        version: 4.x
        nav:
          - modules/ROOT/nav.adoc
        """,
    )
    cache_root = tmp_path / "cache"
    cache_dir = resolve_cache_dir(repo_root, root=cache_root)
    cache_dir.mkdir(parents=True)
    (cache_dir / "playbook.yml").write_text(BASE_PLAYBOOK, encoding="utf-8")

    monkeypatch.chdir(repo_root)
    monkeypatch.setenv("DOCS_PREVIEW_CACHE_DIR", str(cache_root))
    return Project(
        repo_root=repo_root.resolve(),
        cwd=repo_root.resolve(),
        cache_root=cache_root,
        cache_dir=cache_dir,
    )
