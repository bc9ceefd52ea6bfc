"""Runtime settings shared by every docs_preview command.

The CLI builds a single :class:`PreviewSettings` value at startup and passes
it to the synchronizer, assembler, builder, and server. Nothing here is kept
in module state, so tests can construct settings pointing at ``tmp_path``.

Examples
--------
>>> from pathlib import Path
>>> from docs_preview.settings import resolve_cache_dir
>>> first = resolve_cache_dir(Path("/work/a"), root=Path("/cache"))
>>> first == resolve_cache_dir(Path("/work/a"), root=Path("/cache"))
True
>>> first == resolve_cache_dir(Path("/work/b"), root=Path("/cache"))
False
"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import os
import typing as typ
from pathlib import Path

from platformdirs import user_cache_dir

from ._constants import (
    BASE_PLAYBOOK_FILENAME,
    BUILD_DIR,
    CACHE_DIR_ENV,
    DEFAULT_COMPONENT_DIR,
    DEFAULT_DOCS_REPO,
    DEFAULT_PORT,
    LOCAL_PLAYBOOK_FILENAME,
    SITE_DIR,
)

APP_DIR_NAME = "docs-preview"


def default_cache_root(env: typ.Mapping[str, str] | None = None) -> Path:
    """Return the platform cache root used for cloned docs repositories.

    ``DOCS_PREVIEW_CACHE_DIR`` wins when set; otherwise the per-user cache
    directory of the running platform is used (``~/.cache`` or
    ``$XDG_CACHE_HOME`` on Linux, ``~/Library/Caches`` on macOS,
    ``%LOCALAPPDATA%`` on Windows).
    """
    environ = os.environ if env is None else env
    override = environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_cache_dir(APP_DIR_NAME, appauthor=False))


def resolve_cache_dir(cwd: Path, *, root: Path | None = None) -> Path:
    """Return the per-project cache directory for ``cwd``.

    The directory name is the SHA-1 hex digest of the absolute invocation
    path, so the same project always maps to the same clone. Collisions are
    not handled.
    """
    digest = hashlib.sha1(str(cwd.resolve()).encode("utf-8")).hexdigest()  # noqa: S324
    return (root or default_cache_root()) / digest


@dc.dataclass(frozen=True, slots=True)
class PreviewSettings:
    """Immutable configuration for a single docs_preview invocation."""

    cwd: Path
    cache_dir: Path
    component_dirs: tuple[Path, ...] = (Path(DEFAULT_COMPONENT_DIR),)
    port: int = DEFAULT_PORT
    verbose: bool = False
    exact: bool = False
    docs_repo_url: str = DEFAULT_DOCS_REPO
    docs_branch: str | None = None

    @classmethod
    def create(
        cls,
        *,
        cwd: Path | None = None,
        cache_root: Path | None = None,
        component_dirs: typ.Iterable[Path] = (),
        **overrides: typ.Any,
    ) -> PreviewSettings:
        """Build settings for ``cwd`` (default: the process directory)."""
        base = (cwd or Path.cwd()).resolve()
        components = tuple(component_dirs) or (Path(DEFAULT_COMPONENT_DIR),)
        return cls(
            cwd=base,
            cache_dir=resolve_cache_dir(base, root=cache_root),
            component_dirs=components,
            **overrides,
        )

    def component_path(self, component_dir: Path) -> Path:
        """Return ``component_dir`` made absolute against the invocation dir."""
        return component_dir if component_dir.is_absolute() else self.cwd / component_dir

    @property
    def build_dir(self) -> Path:
        return self.cwd / BUILD_DIR

    @property
    def site_dir(self) -> Path:
        return self.cwd / SITE_DIR

    @property
    def base_playbook(self) -> Path:
        return self.cache_dir / BASE_PLAYBOOK_FILENAME

    @property
    def local_playbook(self) -> Path:
        return self.cache_dir / LOCAL_PLAYBOOK_FILENAME

    @property
    def site_url(self) -> str:
        return f"http://localhost:{self.port}"


__all__ = ["PreviewSettings", "default_cache_root", "resolve_cache_dir"]
