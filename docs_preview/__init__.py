"""Local preview builds for Antora documentation components.

This package exposes the CLI entry points used by the ``docs-preview``
console script to scaffold components, sync their versions, and build or
serve a preview of the site with the shared docs repository's tooling.

Exports
-------
- ``app``: Cyclopts application with the ``init``, ``update-version``,
  ``build``, and ``watch`` commands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docs_preview import main
>>> main()  # doctest: +SKIP
>>> from docs_preview import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
