"""Version provider backed by the manifest descriptor of a packaged artifact."""

from __future__ import annotations

import logging
from typing import List, Optional

from .locator import Location, ResourceLocator, SearchPathLocator
from .manifest import Manifest, ManifestError, parse_manifest

MANIFEST_PATH = "META-INF/MANIFEST.MF"

logger = logging.getLogger(__name__)


class ResourceEnumerationError(RuntimeError):
    """Raised when the locator cannot enumerate descriptor candidates."""


class ManifestVersionProvider:
    """Resolve the display version of a project from its manifest.

    Several artifacts may expose a manifest on the same search path, so the
    one belonging to this project is picked by its ``Implementation-Title``.
    The first manifest whose title equals ``project`` wins; later candidates
    are never opened.
    """

    def __init__(self, project: str, locator: Optional[ResourceLocator] = None) -> None:
        if project is None:
            raise TypeError("project must not be None")
        self._project = project
        self._locator: ResourceLocator = locator if locator is not None else SearchPathLocator()

    @property
    def project(self) -> str:
        """Title used to recognise this project's manifest."""
        return self._project

    def get_version(self) -> List[str]:
        """Return ``[version]`` for the matching manifest, or ``[]`` if none matches."""
        logger.debug("Searching for manifest %s titled %r", MANIFEST_PATH, self._project)
        try:
            candidates = iter(self._locator.enumerate(MANIFEST_PATH))
        except OSError as err:
            raise ResourceEnumerationError(f"Unable to enumerate {MANIFEST_PATH}: {err}") from err

        version: Optional[str] = None
        while version is None:
            try:
                location = next(candidates)
            except StopIteration:
                break
            except OSError as err:
                raise ResourceEnumerationError(f"Unable to enumerate {MANIFEST_PATH}: {err}") from err

            manifest = self._read_manifest(location)
            if manifest is not None and self._is_valid(manifest):
                version = _compose_version(manifest)

        if version is None:
            logger.debug("Found no version data")
            return []

        logger.debug("Found version data")
        logger.debug("Version: %s", version)
        return [version]

    def _read_manifest(self, location: Location) -> Optional[Manifest]:
        logger.debug("Reading manifest from %s", location.url)
        try:
            with location.open() as stream:
                return parse_manifest(stream)
        except (OSError, ManifestError) as err:
            logger.error("Unable to read from %s: %s", location.url, err)
            return None

    def _is_valid(self, manifest: Manifest) -> bool:
        return manifest.title is not None and manifest.title == self._project

    def __repr__(self) -> str:
        return f"{type(self).__name__}(project={self._project!r})"


def _compose_version(manifest: Manifest) -> str:
    # "<title> version <version>"; the trailing space stays when there is no version.
    version = f"{manifest.title} "
    if manifest.version is not None:
        version += "version " + manifest.version
    return version


__all__ = ["ManifestVersionProvider", "ResourceEnumerationError", "MANIFEST_PATH"]
