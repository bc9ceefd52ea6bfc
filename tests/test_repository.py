"""Unit tests for synchronizing the shared docs repository."""

from __future__ import annotations

import subprocess
import typing as typ
from pathlib import Path
from types import SimpleNamespace

import pytest

from docs_preview import repository
from docs_preview.repository import DocsRepository

if typ.TYPE_CHECKING:
    from conftest import Project


class FakeGit:
    """Record subprocess calls and emulate ``git clone`` / ``rev-parse``."""

    def __init__(self, revisions: list[str]) -> None:
        self.revisions = revisions
        self.calls: list[tuple[list[str], Path | None]] = []

    def __call__(self, args: list[str], **kwargs: typ.Any) -> SimpleNamespace:
        cwd = kwargs.get("cwd")
        self.calls.append((list(args), cwd))
        if args[:2] == ["git", "clone"]:
            Path(args[-1]).mkdir(parents=True)
        if args[:2] == ["git", "rev-parse"]:
            return SimpleNamespace(returncode=0, stdout=f"{self.revisions.pop(0)}\n")
        return SimpleNamespace(returncode=0, stdout="")

    def commands(self) -> list[list[str]]:
        return [args for args, _ in self.calls]


def test_ensure_clones_installs_and_links_on_first_run(
    project: Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = project.settings("docs")
    # Start from an empty cache.
    (settings.cache_dir / "playbook.yml").unlink()
    settings.cache_dir.rmdir()
    fake = FakeGit(revisions=["abc123"])
    monkeypatch.setattr(repository.subprocess, "run", fake)

    result = DocsRepository(settings).ensure()

    assert result.cloned is True
    assert result.revision_after == "abc123"
    assert fake.commands()[:2] == [
        [
            "git",
            "clone",
            settings.docs_repo_url,
            "--depth=1",
            str(settings.cache_dir),
        ],
        ["npx", "yarn"],
    ]
    assert fake.calls[1][1] == settings.cache_dir, "expected yarn to run in the clone"
    assert settings.site_dir.is_dir(), "expected build/site to be created"
    link = settings.cache_dir / "build"
    assert link.is_symlink()
    assert link.resolve() == settings.build_dir.resolve()


def test_ensure_clone_passes_branch(
    project: Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = project.settings("docs", docs_branch="build-local")
    (settings.cache_dir / "playbook.yml").unlink()
    settings.cache_dir.rmdir()
    fake = FakeGit(revisions=["abc123"])
    monkeypatch.setattr(repository.subprocess, "run", fake)

    DocsRepository(settings).ensure()

    assert "--branch=build-local" in fake.commands()[0]


def test_ensure_pulls_without_reinstall_when_revision_is_unchanged(
    project: Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = project.settings("docs")
    fake = FakeGit(revisions=["abc123", "abc123"])
    monkeypatch.setattr(repository.subprocess, "run", fake)

    result = DocsRepository(settings).ensure()

    assert result.cloned is False
    assert result.reinstalled is False
    assert fake.commands() == [
        ["git", "rev-parse", "HEAD"],
        ["git", "pull"],
        ["git", "rev-parse", "HEAD"],
    ]
    assert all(cwd == settings.cache_dir for _, cwd in fake.calls)


def test_ensure_reinstalls_when_pull_moves_revision(
    project: Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = project.settings("docs")
    fake = FakeGit(revisions=["abc123", "def456"])
    monkeypatch.setattr(repository.subprocess, "run", fake)

    result = DocsRepository(settings).ensure()

    assert result.reinstalled is True
    assert (result.revision_before, result.revision_after) == ("abc123", "def456")
    assert fake.commands()[-1] == ["npx", "yarn"]


def test_ensure_propagates_subprocess_failures(
    project: Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = project.settings("docs")

    def failing_run(args: list[str], **kwargs: typ.Any) -> SimpleNamespace:
        raise subprocess.CalledProcessError(returncode=128, cmd=args)

    monkeypatch.setattr(repository.subprocess, "run", failing_run)

    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        DocsRepository(settings).ensure()
    assert excinfo.value.returncode == 128


def test_link_build_dir_keeps_existing_link(project: Project) -> None:
    settings = project.settings("docs")
    settings.build_dir.mkdir()
    docs_repo = DocsRepository(settings)

    docs_repo.link_build_dir()
    docs_repo.link_build_dir()

    assert (settings.cache_dir / "build").is_symlink()
