"""Derive documentation versions from project versions.

Docs are versioned per major release (``2.x``) except for pre-1.0 projects
and ``--exact`` requests, which keep the minor component (``0.5``, ``1.5``).
The project version is read from ``package.json`` or, for Python projects,
from ``[project].version`` in ``pyproject.toml``.

Examples
--------
>>> from docs_preview.versioning import resolve_docs_version
>>> resolve_docs_version("0.5.2")
'0.5'
>>> resolve_docs_version("1.5.2")
'1.x'
>>> resolve_docs_version("1.5.2", exact=True)
'1.5'
"""

from __future__ import annotations

import json
import os
import re
import subprocess
import tomllib
import typing as typ

from .errors import VersionError
from .manifest import set_manifest_version

if typ.TYPE_CHECKING:
    from pathlib import Path

SEMVER_PATTERN = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:[-+.\w].*)?$")

# npm and yarn name the "create a git tag" setting differently.
_GIT_TAG_ENV_VARS = ("npm_config_git_tag_version", "npm_config_version_git_tag")


def resolve_docs_version(version: str, *, exact: bool = False) -> str:
    """Return the docs version for a ``X.Y.Z`` project version.

    Raises
    ------
    VersionError
        If ``version`` does not start with three numeric components.
    """
    match = SEMVER_PATTERN.match(version.strip())
    if match is None:
        msg = f"Cannot derive a docs version from '{version}'; expected X.Y.Z."
        raise VersionError(msg)
    major, minor = match["major"], match["minor"]
    if major == "0" or exact:
        return f"{major}.{minor}"
    return f"{major}.x"


def read_project_version(cwd: Path) -> str:
    """Return the project version declared in ``package.json`` or ``pyproject.toml``."""
    package_json = cwd / "package.json"
    if package_json.is_file():
        data = json.loads(package_json.read_text(encoding="utf-8"))
        version = data.get("version") if isinstance(data, dict) else None
        if isinstance(version, str) and version:
            return version

    pyproject = cwd / "pyproject.toml"
    if pyproject.is_file():
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
        version = data.get("project", {}).get("version")
        if isinstance(version, str) and version:
            return version

    msg = f"No project version found in {cwd} (looked at package.json and pyproject.toml)."
    raise VersionError(msg)


def project_docs_version(cwd: Path, *, exact: bool = False) -> str:
    return resolve_docs_version(read_project_version(cwd), exact=exact)


def is_tagging_version_bump(env: typ.Mapping[str, str]) -> bool:
    """Return True inside ``npm version`` / ``yarn version`` runs that create a tag."""
    if env.get("npm_lifecycle_event") != "version":
        return False
    git_tag = next((env[name] for name in _GIT_TAG_ENV_VARS if env.get(name)), None)
    return git_tag == "true"


def update_component_version(
    component_dir: Path,
    version: str,
    *,
    env: typ.Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path:
    """Write ``version`` into the component manifest and stage it when tagging.

    When invoked from an ``npm version`` lifecycle script that is about to
    commit and tag, the manifest is added to the git index so the bump commit
    includes it.
    """
    path = set_manifest_version(component_dir, version)
    if is_tagging_version_bump(os.environ if env is None else env):
        subprocess.run(["git", "add", str(path)], check=True, cwd=cwd)  # noqa: S603, S607
    return path


__all__ = [
    "is_tagging_version_bump",
    "project_docs_version",
    "read_project_version",
    "resolve_docs_version",
    "update_component_version",
]
