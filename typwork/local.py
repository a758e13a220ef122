"""The workspace filesystem on the local disk, with URIs as file names."""

from __future__ import annotations

import errno
import os
from pathlib import Path, PurePath
from typing import Iterator
from urllib.parse import unquote_to_bytes, urlsplit
from urllib.request import url2pathname

from .errors import (
    FsPathToUriError,
    NotSourceError,
    OtherIoError,
    SchemeIsNotFileError,
    UriConversionError,
    from_local_io,
)
from .package_manager import PackageManager
from .source import Source

TYPST_EXTENSION = ".typ"


def is_typst(path: str | PurePath) -> bool:
    """Whether `path` names a Typst source file."""
    return PurePath(path).suffix == TYPST_EXTENSION


def uri_to_path(uri: str) -> Path:
    """Convert a `file` URI to an absolute local path."""
    parts = urlsplit(uri)
    if parts.scheme != "file":
        raise SchemeIsNotFileError()
    if parts.netloc not in ("", "localhost"):
        raise UriConversionError()
    if os.name == "nt":
        path = Path(url2pathname(parts.path))
    else:
        path = Path(os.fsdecode(unquote_to_bytes(parts.path)))
    if not path.is_absolute():
        raise UriConversionError()
    return path


def path_to_uri(path: str | os.PathLike[str]) -> str:
    """Convert an absolute path to its `file://` URI."""
    local = Path(path)
    if not local.is_absolute():
        raise FsPathToUriError()
    return local.as_uri()


def read_path_raw(path: str | os.PathLike[str]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as err:
        raise from_local_io(err, os.fspath(path)) from err


def read_path_string(path: str | os.PathLike[str]) -> str:
    data = read_path_raw(path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise OtherIoError(
            OSError(errno.EILSEQ, f"stream did not contain valid UTF-8: {err}")
        ) from err


def write_path_raw(path: str | os.PathLike[str], data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as err:
        raise from_local_io(err, os.fspath(path)) from err


def _regular_files(root: Path) -> Iterator[Path]:
    if root.is_file() and not root.is_symlink():
        yield root
        return
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            candidate = Path(dirpath, name)
            if candidate.is_file() and not candidate.is_symlink():
                yield candidate


class LocalFs:
    """Reads and writes workspace files on the local filesystem."""

    def read_bytes(self, uri: str, package_manager: PackageManager | None) -> bytes:
        return read_path_raw(uri_to_path(uri))

    def read_source(self, uri: str, package_manager: PackageManager) -> Source:
        path = uri_to_path(uri)
        if not is_typst(path):
            raise NotSourceError()
        text = read_path_string(path)
        full_id = package_manager.full_id(uri)
        return Source(full_id.to_file_id(), text)

    def write_raw(self, uri: str, data: bytes) -> None:
        write_path_raw(uri_to_path(uri), data)

    def search_sources(self, root: str) -> list[str]:
        """URIs of every Typst source under the directory `root`."""
        root_path = uri_to_path(root)
        return [path_to_uri(path) for path in _regular_files(root_path) if is_typst(path)]

    def __repr__(self) -> str:
        return "LocalFs()"