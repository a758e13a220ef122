"""Packages, package identifiers and file identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from .errors import UriJoinError

_SEGMENT_SAFE = "!$&'()*+,;=:@-._~"


class VirtualPath:
    """A normalized, rooted path inside a package."""

    __slots__ = ("_parts",)

    def __init__(self, path: str | PurePosixPath = "/") -> None:
        self._parts = self._normalize(str(path).split("/"))

    @staticmethod
    def _normalize(components: Iterable[str]) -> tuple[str, ...]:
        parts: list[str] = []
        for component in components:
            if component in ("", "."):
                continue
            if component == "..":
                if parts:
                    parts.pop()
                continue
            parts.append(component)
        return tuple(parts)

    @classmethod
    def _from_parts(cls, parts: Iterable[str]) -> VirtualPath:
        vpath = cls.__new__(cls)
        vpath._parts = cls._normalize(parts)
        return vpath

    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    def as_rooted_path(self) -> PurePosixPath:
        return PurePosixPath("/", *self._parts)

    def as_rootless_path(self) -> PurePosixPath:
        return PurePosixPath(*self._parts)

    def with_extension(self, extension: str) -> VirtualPath:
        """Replace the extension of the last component; an empty one removes it."""
        if not self._parts:
            return self
        name = self._parts[-1]
        dot = name.rfind(".")
        stem = name[:dot] if dot > 0 else name
        new_name = f"{stem}.{extension}" if extension else stem
        return self._from_parts((*self._parts[:-1], new_name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VirtualPath):
            return NotImplemented
        return self._parts == other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __str__(self) -> str:
        return str(self.as_rooted_path())

    def __repr__(self) -> str:
        return f"VirtualPath({str(self)!r})"


@dataclass(frozen=True)
class PackageSpec:
    namespace: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"@{self.namespace}/{self.name}:{self.version}"


def _segments(path: str) -> list[str]:
    return [unquote(segment) for segment in path.split("/") if segment]


def join_rooted(root: str, vpath: VirtualPath) -> str:
    """Append the rooted path `vpath` to the directory URI `root`."""
    parts = urlsplit(root)
    base = parts.path.rstrip("/")
    tail = "/".join(quote(part, safe=_SEGMENT_SAFE) for part in vpath.parts)
    return urlunsplit((parts.scheme, parts.netloc, f"{base}/{tail}", "", ""))


def make_relative_rooted(root: str, uri: str) -> VirtualPath:
    """Express `uri` as a rooted path inside the directory URI `root`."""
    root_parts = urlsplit(root)
    uri_parts = urlsplit(uri)
    if (root_parts.scheme, root_parts.netloc) != (uri_parts.scheme, uri_parts.netloc):
        raise UriJoinError(f"{uri} does not share a base with {root}")
    root_segments = _segments(root_parts.path)
    uri_segments = _segments(uri_parts.path)
    if uri_segments[: len(root_segments)] != root_segments:
        raise UriJoinError(f"{uri} is not inside {root}")
    return VirtualPath._from_parts(uri_segments[len(root_segments):])


@dataclass(frozen=True)
class Package:
    """A provided package whose files are reached through the `root` URI."""

    root: str

    def vpath_to_uri(self, vpath: VirtualPath) -> str:
        return join_rooted(self.root, vpath)

    def uri_to_vpath(self, uri: str) -> VirtualPath:
        return make_relative_rooted(self.root, uri)


@dataclass(frozen=True)
class PackageId:
    """Either a current package, named by its root URI, or an external package."""

    root: str | None = None
    spec: PackageSpec | None = None

    def __post_init__(self) -> None:
        if (self.root is None) == (self.spec is None):
            raise ValueError("a package ID needs exactly one of a root or a spec")

    @classmethod
    def new_current(cls, root: str) -> PackageId:
        return cls(root=root)

    @classmethod
    def new_external(cls, spec: PackageSpec) -> PackageId:
        return cls(spec=spec)


@dataclass(frozen=True)
class FullFileId:
    """A file inside a package that is named fully, current packages included."""

    package: PackageId
    vpath: VirtualPath

    @property
    def spec(self) -> PackageSpec | None:
        return self.package.spec

    def with_extension(self, extension: str) -> FullFileId:
        return FullFileId(self.package, self.vpath.with_extension(extension))

    def to_file_id(self) -> FileId:
        return FileId(self.spec, self.vpath)


@dataclass(frozen=True)
class FileId:
    """A file inside either the current package (`package` is None) or an external one."""

    package: PackageSpec | None
    vpath: VirtualPath

    def fill(self, current: PackageId) -> FullFileId:
        """Name the package fully, using `current` for the current package."""
        package = current if self.package is None else PackageId.new_external(self.package)
        return FullFileId(package, self.vpath)