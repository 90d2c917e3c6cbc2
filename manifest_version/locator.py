"""Resource locators that enumerate candidate descriptor locations."""

from __future__ import annotations

import logging
import sys
import zipfile
import zlib
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, Protocol, Sequence, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Location(Protocol):
    """A single resource match that can be opened for reading."""

    @property
    def url(self) -> str:
        ...

    def open(self) -> BinaryIO:
        ...


class ResourceLocator(Protocol):
    """Enumerates every resource at a relative path across a search path."""

    def enumerate(self, path: str) -> Iterable[Location]:
        ...


@dataclass(frozen=True)
class FileLocation:
    """A resource stored as a plain file."""

    path: Path

    @property
    def url(self) -> str:
        return self.path.resolve().as_uri()

    def open(self) -> BinaryIO:
        return self.path.open("rb")

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class ArchiveLocation:
    """A resource stored as a member of a zip archive (jar, wheel, egg)."""

    archive: Path
    member: str

    @property
    def url(self) -> str:
        return f"jar:{self.archive.resolve().as_uri()}!/{self.member}"

    def open(self) -> BinaryIO:
        try:
            with zipfile.ZipFile(self.archive) as archive:
                data = archive.read(self.member)
        except (zipfile.BadZipFile, KeyError, RuntimeError, NotImplementedError, zlib.error) as err:
            # Encrypted members, unsupported compression and corrupt data included.
            raise OSError(f"Cannot read {self.member} from {self.archive}: {err}") from err
        return BytesIO(data)

    def __str__(self) -> str:
        return self.url


class SearchPathLocator:
    """Walk a search path the way an import system walks ``sys.path``.

    Directories contribute ``<entry>/<path>`` when that file exists; zip
    archives contribute the member of the same name. Entries that are
    neither are skipped. Without explicit entries ``sys.path`` is read each
    time ``enumerate`` is called.
    """

    def __init__(self, entries: Optional[Sequence[PathLike]] = None) -> None:
        self._entries = None if entries is None else tuple(entries)

    @property
    def entries(self) -> Sequence[PathLike]:
        if self._entries is None:
            return tuple(sys.path)
        return self._entries

    def enumerate(self, path: str) -> Iterator[Location]:
        relative = path.strip("/")
        for entry in self.entries:
            # An empty sys.path entry stands for the current directory.
            root = Path(entry) if entry else Path.cwd()
            if root.is_dir():
                candidate = root / relative
                if candidate.is_file():
                    yield FileLocation(candidate)
            elif root.is_file():
                location = _archive_member(root, relative)
                if location is not None:
                    yield location
            else:
                logger.debug("Skipping missing search path entry %s", root)


class StaticLocator:
    """Yield a fixed sequence of locations regardless of the requested path."""

    def __init__(self, locations: Iterable[Location]) -> None:
        self._locations = list(locations)

    def enumerate(self, path: str) -> Iterator[Location]:
        return iter(self._locations)


def _archive_member(archive: Path, member: str) -> Optional[ArchiveLocation]:
    if not zipfile.is_zipfile(archive):
        logger.debug("Skipping non-archive search path entry %s", archive)
        return None
    try:
        with zipfile.ZipFile(archive) as handle:
            names = set(handle.namelist())
    except (zipfile.BadZipFile, OSError) as err:
        logger.debug("Skipping unreadable archive %s: %s", archive, err)
        return None
    if member not in names:
        return None
    return ArchiveLocation(archive, member)


__all__ = [
    "ArchiveLocation",
    "FileLocation",
    "Location",
    "ResourceLocator",
    "SearchPathLocator",
    "StaticLocator",
]
