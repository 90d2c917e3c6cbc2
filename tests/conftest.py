from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Dict, Optional

import pytest

from manifest_version.logging_config import PACKAGE_LOGGER


def manifest_text(headers: Dict[str, str]) -> str:
    lines = ["Manifest-Version: 1.0"]
    lines.extend(f"{key}: {value}" for key, value in headers.items())
    return "\n".join(lines) + "\n"


class RecordingLocation:
    """In-memory location that counts how often it was opened."""

    def __init__(self, name: str, content: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.url = f"memory:{name}"
        self._content = content
        self._error = error
        self.opened = 0

    def open(self) -> BinaryIO:
        self.opened += 1
        if self._error is not None:
            raise self._error
        return BytesIO((self._content or "").encode("utf-8"))


@pytest.fixture
def write_manifest(tmp_path: Path):
    def _write(root: str, headers: Dict[str, str]) -> Path:
        target = tmp_path / root / "META-INF" / "MANIFEST.MF"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(manifest_text(headers), encoding="utf-8")
        return tmp_path / root

    return _write


@pytest.fixture
def write_jar(tmp_path: Path):
    def _write(name: str, headers: Optional[Dict[str, str]]) -> Path:
        target = tmp_path / name
        with zipfile.ZipFile(target, "w") as archive:
            if headers is not None:
                archive.writestr("META-INF/MANIFEST.MF", manifest_text(headers))
            archive.writestr("app/__init__.py", "")
        return target

    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_broken_jar(tmp_path: Path):
    """Write a jar whose manifest member lists fine but cannot be extracted."""

    def _write(name: str, kind: str) -> Path:
        target = tmp_path / name
        content = manifest_text({"Implementation-Title": "App", "Implementation-Version": "9"})
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("META-INF/MANIFEST.MF", content)
        data = bytearray(target.read_bytes())
        if kind == "encrypted":
            # Flag the member as encrypted in the central directory.
            central = data.index(b"PK\x01\x02")
            data[central + 8] |= 0x01
        elif kind == "corrupt":
            name_length = int.from_bytes(data[26:28], "little")
            extra_length = int.from_bytes(data[28:30], "little")
            start = 30 + name_length + extra_length
            data[start:start + 4] = b"\xff\xff\xff\xff"
        else:
            raise ValueError(kind)
        target.write_bytes(bytes(data))
        return target

    return _write
