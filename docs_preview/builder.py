"""Invoke the docs repository's Antora build for a local playbook."""

from __future__ import annotations

import logging
import subprocess
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .settings import PreviewSettings

logger = logging.getLogger(__name__)

BUILD_SCRIPT = "build:custom"


def build_site(
    settings: PreviewSettings,
    playbook_path: Path,
    *,
    env: typ.Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``npm run build:custom <playbook>`` in the docs checkout.

    Output streams are inherited so generator diagnostics appear live. The
    exit status is returned rather than checked; callers decide whether a
    failed build is fatal.
    """
    args = ["npm", "run", BUILD_SCRIPT, str(playbook_path)]
    logger.debug("building site with %s", playbook_path)
    return subprocess.run(  # noqa: S603
        args,
        check=False,
        cwd=settings.cache_dir,
        env=dict(env) if env is not None else None,
        text=True,
    )


__all__ = ["BUILD_SCRIPT", "build_site"]
