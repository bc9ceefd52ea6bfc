"""Load and update Antora component manifests (``antora.yml``)."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from ._constants import DEFAULT_START_PAGE, MANIFEST_FILENAME
from .errors import ManifestError

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(slots=True)
class ComponentManifest:
    """Fields of a component descriptor that docs_preview reads or writes."""

    name: str
    title: str | None = None
    version: str | None = None
    start_page: str | None = None
    nav: list[str] = dc.field(default_factory=list)

    @property
    def start_page_or_default(self) -> str:
        return self.start_page or DEFAULT_START_PAGE

    @property
    def start_page_ref(self) -> str:
        """Return the ``component::page`` reference Antora expects."""
        return f"{self.name}::{self.start_page_or_default}"


def manifest_path(component_dir: Path) -> Path:
    return component_dir / MANIFEST_FILENAME


def build_roundtrip_yaml() -> YAML:
    """Return a ruamel loader that keeps comments and key order on rewrite."""
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def load_manifest(component_dir: Path) -> ComponentManifest:
    """Load the manifest stored in ``component_dir``.

    Raises
    ------
    ManifestError
        If ``antora.yml`` is missing, is not valid YAML, is not a mapping, or
        has no string ``name``.
    """
    path = manifest_path(component_dir)
    if not path.is_file():
        msg = f"Component manifest '{path}' not found."
        raise ManifestError(msg)

    loader = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = loader.load(handle)
    except YAMLError as exc:
        msg = f"Component manifest '{path}' is not valid YAML: {exc}"
        raise ManifestError(msg) from exc

    if not isinstance(raw, cabc.Mapping):
        msg = f"Component manifest '{path}' must be a mapping."
        raise ManifestError(msg)

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        msg = f"Component manifest '{path}' is missing 'name'."
        raise ManifestError(msg)

    nav = raw.get("nav") or []
    return ComponentManifest(
        name=name,
        title=_optional_str(raw.get("title")),
        version=_optional_str(raw.get("version")),
        start_page=_optional_str(raw.get("start_page")),
        nav=[str(entry) for entry in nav] if isinstance(nav, list) else [],
    )


def set_manifest_version(component_dir: Path, version: str) -> Path:
    """Rewrite the ``version`` field of a manifest in place.

    Other keys, their order, and comments are preserved.
    """
    path = manifest_path(component_dir)
    if not path.is_file():
        msg = f"Component manifest '{path}' not found."
        raise ManifestError(msg)

    yaml = build_roundtrip_yaml()
    try:
        with path.open("r", encoding="utf-8") as handle:
            document = yaml.load(handle) or CommentedMap()
    except YAMLError as exc:
        msg = f"Component manifest '{path}' is not valid YAML: {exc}"
        raise ManifestError(msg) from exc
    if not isinstance(document, CommentedMap):
        msg = f"Component manifest '{path}' must be a mapping."
        raise ManifestError(msg)

    document["version"] = version
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(document, handle)
    return path


def _optional_str(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "ComponentManifest",
    "build_roundtrip_yaml",
    "load_manifest",
    "manifest_path",
    "set_manifest_version",
]
