"""Serve the preview site with live reload and rebuild on changes.

``docs-preview watch`` serves ``build/site`` through :mod:`livereload`. The
server watches three things:

* the built site itself, so connected browsers refresh when output changes;
* every component directory (``*.yml`` and ``*.adoc`` only), which triggers
  an Antora rebuild;
* the source patterns given on the command line, which trigger the project's
  ``prepare-docs`` extraction script.

Rebuilds and extractions are wrapped in :class:`~docs_preview.debounce.Debouncer`
instances sharing one lock, so at most one subprocess runs at a time and
bursts of edits collapse into a single run.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import os
import socket
import subprocess
import sys
import threading
import typing as typ
from pathlib import Path

from livereload import Server

from ._constants import (
    CONTENT_SUFFIXES,
    DEBOUNCE_SECONDS,
    DISABLE_PREPARE_ENV,
    PORT_PROBE_TIMEOUT,
)
from .builder import build_site
from .debounce import Debouncer
from .errors import PortBusyError, ServerError

if typ.TYPE_CHECKING:
    from .settings import PreviewSettings

logger = logging.getLogger(__name__)

PREPARE_DOCS_COMMAND = ("npm", "run", "prepare-docs")


def port_in_use(
    port: int, *, host: str = "localhost", timeout: float = PORT_PROBE_TIMEOUT
) -> bool:
    """Return True when something already accepts TCP connections on ``port``."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def ignore_non_content(filename: str) -> bool:
    """Tell livereload to skip files that cannot affect the Antora build."""
    return not filename.endswith(CONTENT_SUFFIXES)


def child_env(base: cabc.Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment for subprocesses; stops ``prepare-docs`` from re-invoking us."""
    env = dict(os.environ if base is None else base)
    env[DISABLE_PREPARE_ENV] = "true"
    return env


def _latest_path(changed: object) -> Path | None:
    if isinstance(changed, (str, os.PathLike)):
        return Path(changed)
    if isinstance(changed, cabc.Sequence) and changed:
        return Path(changed[-1])
    return None


class PreviewServer:
    """Wire the live-reload server, watchers, and debounced rebuilds together."""

    def __init__(
        self,
        settings: PreviewSettings,
        playbook_path: Path,
        patterns: cabc.Sequence[str] = (),
        *,
        server_factory: typ.Callable[[], Server] = Server,
        delay: float = DEBOUNCE_SECONDS,
    ) -> None:
        self.settings = settings
        self.playbook_path = playbook_path
        self.patterns = tuple(patterns)
        self._server_factory = server_factory
        self.env = child_env()
        lane = threading.Lock()
        self.rebuild = Debouncer(self.rebuild_site, delay, lock=lane, name="rebuild")
        self.extract = Debouncer(self.prepare_docs, delay, lock=lane, name="prepare-docs")

    def rebuild_site(self) -> int:
        print("Detected docs changes, rebuilding site...", file=sys.stderr)
        result = build_site(self.settings, self.playbook_path, env=self.env)
        if result.returncode == 0:
            print(f"The site is available at {self.settings.site_url}", file=sys.stderr)
        else:
            print(f"Site build failed with exit code {result.returncode}", file=sys.stderr)
        return result.returncode

    def prepare_docs(self, changed: Path | None = None) -> int:
        print("Detected source changes, rebuilding docs...", file=sys.stderr)
        cwd = changed.parent if changed is not None else self.settings.cwd
        result = subprocess.run(  # noqa: S603
            list(PREPARE_DOCS_COMMAND),
            check=False,
            cwd=cwd,
            env=self.env,
            text=True,
        )
        if result.returncode != 0:
            logger.warning("prepare-docs exited with %s", result.returncode)
        return result.returncode

    # livereload passes the changed paths for glob watches when the callback
    # accepts an argument, and calls it bare otherwise.
    def on_source_change(self, changed: object = None) -> None:
        self.extract(_latest_path(changed))

    def on_content_change(self, changed: object = None) -> None:
        self.rebuild()

    def create_server(self) -> Server:
        """Build a livereload server with every watch registered."""
        server = self._server_factory()
        server.watch(str(self.settings.site_dir))
        for pattern in self.patterns:
            server.watch(pattern, self.on_source_change)
        for component_dir in self.settings.component_dirs:
            server.watch(
                str(self.settings.component_path(component_dir)),
                self.on_content_change,
                ignore=ignore_non_content,
            )
        return server

    def serve(self) -> None:
        """Serve until the process exits.

        Raises
        ------
        PortBusyError
            If the configured port already accepts connections.
        ServerError
            If livereload fails to bind or crashes.
        """
        port = self.settings.port
        if port_in_use(port):
            msg = (
                f"Is port {port} available? "
                "Consider using a different port with '-p PORT'."
            )
            raise PortBusyError(msg)

        if self.settings.verbose:
            logging.getLogger("livereload").setLevel(logging.DEBUG)

        server = self.create_server()
        # Initial build; later ones come from the watchers.
        self.rebuild()
        try:
            server.serve(
                port=port,
                host="localhost",
                root=str(self.settings.site_dir),
            )
        except OSError as exc:
            msg = f"There has been an error in the server process.\n{exc}"
            raise ServerError(msg) from exc
        finally:
            self.rebuild.cancel()
            self.extract.cancel()


__all__ = [
    "PREPARE_DOCS_COMMAND",
    "PreviewServer",
    "child_env",
    "ignore_non_content",
    "port_in_use",
]
