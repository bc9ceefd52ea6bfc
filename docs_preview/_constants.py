"""Common literal values used across docs_preview.

These constants keep file names, sentinels, and defaults centralized so the
synchronizer, assembler, and tests import the same values without drifting.
Intended for internal use within the docs_preview package.

Examples
--------
>>> from docs_preview import _constants
>>> _constants.MANIFEST_FILENAME
'antora.yml'
>>> _constants.CONTENT_BRANCHES
'HEAD'
"""

DEFAULT_DOCS_REPO = "https://github.com/OpenZeppelin/docs.openzeppelin.com.git"
DEFAULT_COMPONENT_DIR = "docs"
DEFAULT_PORT = 8080
DEFAULT_START_PAGE = "index.adoc"

MANIFEST_FILENAME = "antora.yml"
BASE_PLAYBOOK_FILENAME = "playbook.yml"
LOCAL_PLAYBOOK_FILENAME = "local-playbook.yml"
BUILD_DIR = "build"
SITE_DIR = "build/site"

# Antora reads the worktree instead of a named ref when branches is HEAD.
CONTENT_BRANCHES = "HEAD"
HTML_EXTENSION_STYLE = "default"

CONTENT_SUFFIXES = (".yml", ".adoc")
DEBOUNCE_SECONDS = 0.5
PORT_PROBE_TIMEOUT = 0.1

DISABLE_PREPARE_ENV = "DISABLE_PREPARE_DOCS"
CACHE_DIR_ENV = "DOCS_PREVIEW_CACHE_DIR"
