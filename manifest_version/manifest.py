"""Parsing of JAR-style manifest descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterator, List, Mapping, Optional, Tuple

MANIFEST_VERSION = "Manifest-Version"
IMPLEMENTATION_TITLE = "Implementation-Title"
IMPLEMENTATION_VERSION = "Implementation-Version"
IMPLEMENTATION_VENDOR = "Implementation-Vendor"
SECTION_NAME = "Name"

MAX_LINE_BYTES = 512
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,70}$")


class ManifestError(ValueError):
    """Raised when a manifest stream cannot be parsed."""


class Attributes(Mapping[str, str]):
    """Read-only header mapping with case-insensitive names."""

    def __init__(self, items: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, Tuple[str, str]] = {}
        for key, value in (items or {}).items():
            self._set(key, value)

    def _set(self, key: str, value: str) -> None:
        lowered = key.lower()
        # A repeated header keeps the first spelling but takes the last value.
        original = self._data[lowered][0] if lowered in self._data else key
        self._data[lowered] = (original, value)

    def __getitem__(self, key: str) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._data[key.lower()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Attributes({dict(self.items())!r})"


@dataclass
class Manifest:
    """Parsed manifest: the main section plus named per-entry sections."""

    main_attributes: Attributes = field(default_factory=Attributes)
    entries: Dict[str, Attributes] = field(default_factory=dict)

    @property
    def title(self) -> Optional[str]:
        return self.main_attributes.get(IMPLEMENTATION_TITLE)

    @property
    def version(self) -> Optional[str]:
        return self.main_attributes.get(IMPLEMENTATION_VERSION)


def parse_manifest(stream: BinaryIO) -> Manifest:
    """Parse a manifest from a binary stream.

    The main section runs up to the first blank line. Every following section
    must carry a ``Name`` header and is stored in ``Manifest.entries`` under
    that name.
    """
    sections = _split_sections(stream.read())
    manifest = Manifest()
    if not sections:
        return manifest

    manifest.main_attributes = _build_attributes(sections[0])
    for headers in sections[1:]:
        attributes = _build_attributes(headers)
        name = attributes.get(SECTION_NAME)
        if name is None:
            raise ManifestError("Manifest entry section is missing its Name header.")
        manifest.entries[name] = attributes
    return manifest


def _split_sections(raw: bytes) -> List[List[Tuple[str, str]]]:
    sections: List[List[Tuple[str, str]]] = []
    # Raw header bytes with their starting line; continuations are joined
    # before decoding so multi-byte characters may wrap across lines.
    pending: List[Tuple[int, bytes]] = []
    for number, chunk in enumerate(raw.splitlines(keepends=True), start=1):
        # The limit counts the line terminator.
        if len(chunk) > MAX_LINE_BYTES:
            raise ManifestError(f"Manifest line {number} is too long.")
        line = chunk.rstrip(b"\r\n")
        if not line:
            # The main section ends at the first blank line, even when empty.
            if pending or not sections:
                sections.append([_split_header(data, start) for start, data in pending])
                pending = []
            continue
        if line.startswith(b" "):
            if not pending:
                raise ManifestError(f"Manifest line {number} continues no header.")
            start, data = pending[-1]
            pending[-1] = (start, data + line[1:])
            continue
        pending.append((number, line))
    if pending:
        sections.append([_split_header(data, start) for start, data in pending])
    return sections


def _split_header(data: bytes, number: int) -> Tuple[str, str]:
    try:
        line = data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ManifestError(f"Manifest line {number} is not valid UTF-8.") from err
    name, separator, value = line.partition(": ")
    if not separator:
        raise ManifestError(f"Invalid header field on manifest line {number}.")
    if not _NAME_PATTERN.match(name):
        raise ManifestError(f"Invalid header name {name!r} on manifest line {number}.")
    return name, value


def _build_attributes(headers: List[Tuple[str, str]]) -> Attributes:
    attributes = Attributes()
    for key, value in headers:
        attributes._set(key, value)
    return attributes


__all__ = [
    "Attributes",
    "Manifest",
    "ManifestError",
    "parse_manifest",
    "IMPLEMENTATION_TITLE",
    "IMPLEMENTATION_VERSION",
    "IMPLEMENTATION_VENDOR",
    "MANIFEST_VERSION",
]
