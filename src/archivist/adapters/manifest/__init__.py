"""TOML clone manifests."""

from __future__ import annotations

from .loader import (
    ManifestError,
    build_registry,
    import_type,
    load_manifest,
    load_registry,
    parse_manifest,
)
from .schema import CloneDeclaration, CloneManifest

__all__ = [
    "CloneDeclaration",
    "CloneManifest",
    "ManifestError",
    "build_registry",
    "import_type",
    "load_manifest",
    "load_registry",
    "parse_manifest",
]
