"""Cyclopts CLI entrypoint for previewing Antora documentation locally.

The ``docs-preview`` console script scaffolds components, keeps their version
in step with the project, and builds or serves a preview of the docs site
using the shared documentation repository's tooling. Running it without a
command is the same as ``docs-preview build``.

The options are shared by every command and may appear before or after it, so
``docs-preview -c docs watch`` and ``docs-preview watch -c docs`` are the same
invocation. Every option can also be supplied through a ``DOCS_PREVIEW_*``
environment variable (``DOCS_PREVIEW_PORT=9000``), which suits npm scripts and
CI.

Examples
--------
Build the site for the default ``docs`` component:

>>> from docs_preview.cli import main
>>> main()  # doctest: +SKIP

Serve two components and re-run extraction when contracts change:

>>> from docs_preview.cli import app
>>> app(
...     ["-c", "docs", "-c", "guides", "watch", "contracts/**/*.sol"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import contextlib
import logging
import subprocess
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_DOCS_REPO, DEFAULT_PORT, SITE_DIR
from .builder import build_site
from .errors import PreviewError
from .playbook import assemble_playbook
from .repository import DocsRepository
from .scaffold import ComponentScaffolder
from .server import PreviewServer
from .settings import PreviewSettings
from .versioning import project_docs_version, update_component_version

app = App(
    name="docs-preview",
    help="Build and serve local previews of Antora documentation.",
    config=cyclopts.config.Env("DOCS_PREVIEW_", command=False),  # type: ignore[unknown-argument]
)

Command = typ.Literal["init", "update-version", "build", "watch"]

CommandArg = typ.Annotated[
    Command,
    Parameter(
        help=(
            "init: scaffold each component; update-version: sync antora.yml "
            "versions; build: build ./build/site; watch: serve with live reload"
        ),
    ),
]
Components = typ.Annotated[
    list[Path] | None,
    Parameter(
        name=["--component", "-c"],
        help="Component directory holding antora.yml (repeatable, default: docs)",
    ),
]
Port = typ.Annotated[int, Parameter(name=["--port", "-p"], help="Preview server port")]
Verbose = typ.Annotated[bool, Parameter(help="Log subprocess and server details")]
Exact = typ.Annotated[
    bool, Parameter(help="Version docs by major.minor instead of major.x")
]
DocsRepo = typ.Annotated[str, Parameter(help="Shared docs repository to clone")]
DocsBranch = typ.Annotated[
    str | None, Parameter(help="Branch of the shared docs repository")
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@contextlib.contextmanager
def _reporting_errors() -> typ.Iterator[None]:
    """Turn known failures into a message and an exit status."""
    try:
        yield
    except PreviewError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except subprocess.CalledProcessError as exc:
        command = " ".join(str(arg) for arg in exc.cmd)
        print(f"error: '{command}' exited with {exc.returncode}", file=sys.stderr)
        raise SystemExit(exc.returncode or 1) from exc


def _prepare(settings: PreviewSettings) -> Path:
    """Synchronize the docs checkout, then assemble the local playbook."""
    DocsRepository(settings).ensure()
    return assemble_playbook(settings)


def init(settings: PreviewSettings) -> None:
    """Create the files a new component needs, leaving existing ones alone.

    The component name is the invocation directory's name and the version is
    derived from the project's ``package.json`` or ``pyproject.toml``.
    """
    version = project_docs_version(settings.cwd, exact=settings.exact)
    for component_dir in settings.component_dirs:
        scaffolder = ComponentScaffolder(
            settings.component_path(component_dir),
            name=settings.cwd.name,
            version=version,
        )
        for path in scaffolder.run():
            print(f"wrote {_format_path(path)}")


def update_version(settings: PreviewSettings) -> None:
    """Rewrite ``version`` in every component manifest.

    Meant to run from an ``npm version`` lifecycle script; when npm is about
    to tag the release the manifests are staged with ``git add``.
    """
    version = project_docs_version(settings.cwd, exact=settings.exact)
    for component_dir in settings.component_dirs:
        path = update_component_version(
            settings.component_path(component_dir), version, cwd=settings.cwd
        )
        print(f"set {_format_path(path)} version to {version}")


def build(settings: PreviewSettings) -> None:
    """Synchronize the docs repository, assemble a playbook, and run Antora.

    Raises
    ------
    SystemExit
        With the build's exit code when Antora fails.
    """
    result = build_site(settings, _prepare(settings))
    if result.returncode != 0:
        print(f"error: site build exited with {result.returncode}", file=sys.stderr)
        raise SystemExit(result.returncode)
    print(f"The site is available at ./{SITE_DIR}", file=sys.stderr)


def watch(settings: PreviewSettings, patterns: tuple[str, ...]) -> None:
    """Serve ``build/site`` and rebuild whenever component files change.

    A change to a file matching one of ``patterns`` runs ``npm run
    prepare-docs`` in that file's directory; the site itself is rebuilt only
    when the component directories change, whether by hand or by extraction.
    """
    PreviewServer(settings, _prepare(settings), patterns).serve()


@app.default
def run(
    command: CommandArg = "build",
    /,
    *patterns: str,
    component: Components = None,
    port: Port = DEFAULT_PORT,
    verbose: Verbose = False,
    exact: Exact = False,
    docs_repo: DocsRepo = DEFAULT_DOCS_REPO,
    docs_branch: DocsBranch = None,
) -> None:
    """Dispatch ``command`` with one settings value built from the options.

    Parameters
    ----------
    patterns : str
        Glob patterns of source files watched by ``watch``; other commands
        ignore them.

    Raises
    ------
    SystemExit
        With 1 for configuration errors such as a missing manifest, git
        checkout, or free port, and with a failing subprocess's own status.
    """
    _configure_logging(verbose)
    settings = PreviewSettings.create(
        component_dirs=component or (),
        port=port,
        verbose=verbose,
        exact=exact,
        docs_repo_url=docs_repo,
        docs_branch=docs_branch,
    )
    with _reporting_errors():
        if command == "init":
            init(settings)
        elif command == "update-version":
            update_version(settings)
        elif command == "watch":
            watch(settings, patterns)
        else:
            build(settings)


def main() -> None:
    """Invoke the Cyclopts application that powers ``docs-preview``.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
