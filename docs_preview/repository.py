"""Keep the shared documentation-build repository checked out and installed.

The docs site tooling (Antora playbook, UI bundle, npm scripts) lives in a
central repository. :class:`DocsRepository` clones it into the per-project
cache directory on first use, pulls it on later runs, and reinstalls npm
dependencies whenever the checked-out revision moves.

A ``build`` directory is created in the invocation directory and the clone's
``build`` path is symlinked to it, so generated output lands in the project
rather than in the cache.

Failures are not retried: any non-zero ``git`` or ``yarn`` exit raises
:class:`subprocess.CalledProcessError` and leaves the cache as it is.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import subprocess
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .settings import PreviewSettings

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SyncResult:
    """What :meth:`DocsRepository.ensure` did to the cache directory."""

    cloned: bool
    revision_before: str | None
    revision_after: str | None
    reinstalled: bool


def run_command(
    args: list[str], *, cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    """Run ``args`` with inherited stdio, raising on a non-zero exit."""
    logger.debug("running %s (cwd=%s)", " ".join(args), cwd)
    return subprocess.run(  # noqa: S603
        args,
        check=True,
        cwd=cwd,
        text=True,
    )


class DocsRepository:
    """Clone, update, and install the shared docs repository for a project."""

    def __init__(self, settings: PreviewSettings) -> None:
        self.settings = settings

    @property
    def path(self) -> Path:
        return self.settings.cache_dir

    def ensure(self) -> SyncResult:
        """Make sure an up-to-date, installed checkout exists in the cache."""
        self.settings.site_dir.mkdir(parents=True, exist_ok=True)

        if not self.path.exists():
            self.clone()
            self.install()
            self.link_build_dir()
            revision = self.revision()
            return SyncResult(
                cloned=True,
                revision_before=None,
                revision_after=revision,
                reinstalled=True,
            )

        before = self.revision()
        self.pull()
        after = self.revision()
        reinstalled = before != after
        if reinstalled:
            logger.info("docs repository moved from %s to %s", before, after)
            self.install()
        return SyncResult(
            cloned=False,
            revision_before=before,
            revision_after=after,
            reinstalled=reinstalled,
        )

    def clone(self) -> None:
        args = ["git", "clone", self.settings.docs_repo_url, "--depth=1"]
        if self.settings.docs_branch:
            args.append(f"--branch={self.settings.docs_branch}")
        args.append(str(self.path))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        run_command(args)

    def pull(self) -> None:
        run_command(["git", "pull"], cwd=self.path)

    def install(self) -> None:
        run_command(["npx", "yarn"], cwd=self.path)

    def revision(self) -> str:
        """Return the commit currently checked out in the cache clone."""
        completed = subprocess.run(  # noqa: S603
            ["git", "rev-parse", "HEAD"],  # noqa: S607
            check=True,
            cwd=self.path,
            text=True,
            capture_output=True,
        )
        return completed.stdout.strip()

    def link_build_dir(self) -> None:
        """Point ``<cache>/build`` at the project's ``build`` directory."""
        link = self.path / "build"
        if link.is_symlink() or link.exists():
            return
        link.symlink_to(self.settings.build_dir.resolve(), target_is_directory=True)


__all__ = ["DocsRepository", "SyncResult", "run_command"]
