"""The view of a project that a single compilation works against."""

from __future__ import annotations

import dataclasses
import datetime as dt

from .clock import Now
from .errors import FsError
from .fonts import Font, FontInfo
from .package import FileId
from .project import Project
from .source import Source


class ProjectWorld:
    """A project with a chosen main source, alive for one compilation.

    The current time is taken once, on first use, and kept for the rest of the compilation.
    """

    def __init__(self, project: Project, main: Source, now: Now | None = None) -> None:
        self._project = project
        self._main = main
        self._now = now if now is not None else Now()

    @property
    def project(self) -> Project:
        return self._project

    def now(self) -> dt.datetime:
        return self._now.datetime()

    def write_raw(self, uri: str, data: bytes) -> None:
        """Write raw data to a file.

        A cached copy of the file is not updated and stays stale until invalidated.
        """
        self._project.write_raw(uri, data)

    def book(self) -> tuple[FontInfo, ...]:
        return self._project.font_book()

    def main(self) -> Source:
        return dataclasses.replace(self._main)

    def source(self, file_id: FileId) -> Source:
        try:
            return self._project.read_source_by_id(file_id)
        except FsError as err:
            raise err.to_file_error(file_id) from err

    def file(self, file_id: FileId) -> bytes:
        try:
            return self._project.read_bytes_by_id(file_id)
        except FsError as err:
            raise err.to_file_error(file_id) from err

    def font(self, font_id: int) -> Font | None:
        return self._project.font(font_id)

    def today(self, offset: int | None) -> dt.date | None:
        return self._now.date_with_offset(offset)

    def __repr__(self) -> str:
        return f"ProjectWorld(project={self._project!r}, main={self._main.file_id!r})"