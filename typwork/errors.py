"""Errors raised by the workspace filesystem and the package layer."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class FileError(Exception):
    """A file access failure in the form reported to the compiler."""

    class Kind(enum.Enum):
        NOT_FOUND = "not_found"
        ACCESS_DENIED = "access_denied"
        IS_DIRECTORY = "is_directory"
        NOT_SOURCE = "not_source"
        PACKAGE = "package"
        OTHER = "other"

    kind: FileError.Kind
    path: PurePath | None = None
    message: str | None = None

    def __str__(self) -> str:
        detail = self.message if self.message is not None else self.path
        if detail is None:
            return self.kind.value
        return f"{self.kind.value}: {detail}"


class FsError(Exception):
    """Base class of every filesystem error in a workspace."""

    default_message = "filesystem error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)

    def to_file_error(self, file_id: Any) -> FileError:
        """Log this error and convert it for the file with ID `file_id`."""
        logger.error("filesystem error: %s", self)
        return self._file_error(file_id)

    def _file_error(self, file_id: Any) -> FileError:
        return FileError(FileError.Kind.OTHER, message=str(self))


class NotSourceError(FsError):
    default_message = "expected Typst source file, but found something else"

    def _file_error(self, file_id: Any) -> FileError:
        return FileError(FileError.Kind.NOT_SOURCE)


class NotFoundLocalError(FsError):
    def __init__(self, path: str | PurePath) -> None:
        self.path = PurePath(path)
        super().__init__(f"could not find `{self.path}` on the local filesystem")

    def _file_error(self, file_id: Any) -> FileError:
        return FileError(FileError.Kind.NOT_FOUND, path=self.path)


class OtherIoError(FsError):
    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(str(error))

    def _file_error(self, file_id: Any) -> FileError:
        path = file_id.vpath.as_rooted_path()
        if isinstance(self.error, FileNotFoundError):
            return FileError(FileError.Kind.NOT_FOUND, path=path)
        if isinstance(self.error, PermissionError):
            return FileError(FileError.Kind.ACCESS_DENIED, path=path)
        if isinstance(self.error, IsADirectoryError):
            return FileError(FileError.Kind.IS_DIRECTORY, path=path)
        return FileError(FileError.Kind.OTHER, path=path, message=str(self.error))


class NotProvidedError(FsError):
    default_message = "the provider does not provide the requested URI"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__()


class UriJoinError(FsError):
    default_message = "could not join path to URI"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__()


class PackageError(FsError):
    default_message = "package error"


class CurrentPackageNotFoundError(PackageError):
    default_message = "could not find current package"

    def _file_error(self, file_id: Any) -> FileError:
        return FileError(FileError.Kind.NOT_FOUND, path=file_id.vpath.as_rootless_path())


class ExternalPackageError(PackageError):
    """An external package could not be provided.

    `from_repository` marks failures to fetch the package from its repository.
    """

    default_message = "could not get package from repository"

    def __init__(self, message: str | None = None, *, from_repository: bool = False) -> None:
        self.from_repository = from_repository
        super().__init__(message)

    def _file_error(self, file_id: Any) -> FileError:
        if file_id.package is None:
            logger.error("cannot get spec to report package error for %r", file_id)
            return FileError(FileError.Kind.PACKAGE, message=str(self))
        if self.from_repository:
            return FileError(FileError.Kind.PACKAGE, message=str(self))
        return FileError(FileError.Kind.OTHER, message=str(self))


class UriToFsPathError(FsError):
    """A URI could not be turned into a local filesystem path."""


class SchemeIsNotFileError(UriToFsPathError, NotProvidedError):
    def __init__(self) -> None:
        NotProvidedError.__init__(
            self, "cannot convert to path since scheme of URI is not `file`"
        )


class UriConversionError(UriToFsPathError):
    default_message = "URI to path conversion error"


class FsPathToUriError(ValueError):
    def __init__(self) -> None:
        super().__init__("cannot convert to URI since path is not absolute")


def from_local_io(err: OSError, path: str | PurePath) -> FsError:
    """Convert an OS error raised while accessing `path`."""
    if isinstance(err, FileNotFoundError):
        return NotFoundLocalError(path)
    return OtherIoError(err)