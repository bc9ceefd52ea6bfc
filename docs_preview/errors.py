"""Error kinds raised by docs_preview.

Everything user-facing derives from :class:`PreviewError`, which the CLI turns
into a message on stderr and exit code 1. Failing subprocesses surface as
:class:`subprocess.CalledProcessError` instead and keep their own exit code.
"""

from __future__ import annotations


class PreviewError(RuntimeError):
    """Base class for failures the CLI reports without a traceback."""


class NotInRepositoryError(PreviewError):
    """Raised when the invocation directory is not inside a git checkout."""


class ManifestError(PreviewError):
    """Raised when a component manifest is missing or cannot be parsed."""


class PlaybookError(PreviewError):
    """Raised when the base playbook template is missing or malformed."""


class VersionError(PreviewError, ValueError):
    """Raised when a project version cannot be turned into a docs version."""


class PortBusyError(PreviewError):
    """Raised when the preview server port already accepts connections."""


class ServerError(PreviewError):
    """Raised when the live-reload server cannot start."""


__all__ = [
    "ManifestError",
    "NotInRepositoryError",
    "PlaybookError",
    "PortBusyError",
    "PreviewError",
    "ServerError",
    "VersionError",
]
