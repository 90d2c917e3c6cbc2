"""Resolve a CLI application's version from its packaged manifest."""

from importlib import metadata

from .locator import ArchiveLocation, FileLocation, SearchPathLocator, StaticLocator
from .manifest import Manifest, ManifestError, parse_manifest
from .provider import MANIFEST_PATH, ManifestVersionProvider, ResourceEnumerationError


def get_version() -> str:
    """Return the package version, or '0.0.0' if metadata is unavailable."""
    try:
        return metadata.version("manifest-version")
    except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
        return "0.0.0"


__all__ = [
    "ArchiveLocation",
    "FileLocation",
    "MANIFEST_PATH",
    "Manifest",
    "ManifestError",
    "ManifestVersionProvider",
    "ResourceEnumerationError",
    "SearchPathLocator",
    "StaticLocator",
    "get_version",
    "parse_manifest",
]
