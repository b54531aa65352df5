"""Load clone manifests into a :class:`CloneRegistry`."""

from __future__ import annotations

import logging
import tomllib
from typing import TYPE_CHECKING

from pydantic import ValidationError

from archivist.config import ConfigurationError
from archivist.domain.cloning import SELF, CloneRegistry, resolve_reference

from .schema import CloneManifest

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


class ManifestError(ConfigurationError):
    """Raised when a clone manifest cannot be read or applied."""


def load_manifest(path: Path) -> CloneManifest:
    """Parse and validate the manifest at ``path``."""

    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ManifestError(f"Cannot read clone manifest {path}: {exc}") from exc
    return parse_manifest(document, origin=str(path))


def parse_manifest(document: dict[str, object], *, origin: str = "<manifest>") -> CloneManifest:
    try:
        return CloneManifest.model_validate(document)
    except ValidationError as exc:
        raise ManifestError(f"Invalid clone manifest {origin}:\n{exc}") from exc


def build_registry(manifest: CloneManifest, registry: CloneRegistry | None = None) -> CloneRegistry:
    """Declare every manifest entry on ``registry`` (a new one by default).

    Source types are imported eagerly. Targets stay as references and are
    resolved when a receiver is built, so an unresolvable target falls back
    to the source's own type like any other construction failure.
    """

    target_registry = registry or CloneRegistry()
    for source_reference, declaration in manifest.clone.items():
        source_type = import_type(source_reference)
        target_registry.declare(
            source_type,
            to=SELF if declaration.clones_to_self else declaration.to,
            attribute_map=declaration.attribute_map,
            include=declaration.include,
            exclude=declaration.exclude,
            associations=declaration.associations,
            unless=declaration.unless,
        )
        log.debug("Declared %s cloneable from manifest", source_reference)
    return target_registry


def load_registry(path: Path, registry: CloneRegistry | None = None) -> CloneRegistry:
    return build_registry(load_manifest(path), registry)


def import_type(reference: str) -> type:
    """Import a ``"module:Class"`` reference, raising :class:`ManifestError` on failure."""

    try:
        resolved = resolve_reference(reference)
    except (ImportError, AttributeError, ValueError) as exc:
        raise ManifestError(f"Cannot import {reference!r}: {exc}") from exc
    if not isinstance(resolved, type):
        raise ManifestError(f"{reference!r} does not name a class")
    return resolved
