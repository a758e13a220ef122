"""A current package seen together with the workspace that provides everything else."""

from __future__ import annotations

from .fonts import Font, FontInfo
from .package import FileId, FullFileId, PackageId
from .source import Source
from .workspace import Workspace


class Project:
    """Interprets file IDs, taking `current` as the package of IDs without one."""

    def __init__(self, current: PackageId, workspace: Workspace) -> None:
        self._current = current
        self._workspace = workspace

    @property
    def current(self) -> PackageId:
        return self._current

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    def font_book(self) -> tuple[FontInfo, ...]:
        return self._workspace.font_manager.book

    def font(self, font_id: int) -> Font | None:
        return self._workspace.font_manager.font(font_id)

    def fill_id(self, file_id: FileId) -> FullFileId:
        return file_id.fill(self._current)

    def full_id_to_uri(self, full_id: FullFileId) -> str:
        return self._workspace.uri(full_id)

    def read_source_by_uri(self, uri: str) -> Source:
        return self._workspace.read_source(uri)

    def write_raw(self, uri: str, data: bytes) -> None:
        """Write raw data to a file.

        A cached copy of the file is not updated and stays stale until invalidated.
        """
        self._workspace.write_raw(uri, data)

    def read_source_by_id(self, file_id: FileId) -> Source:
        uri = self.full_id_to_uri(self.fill_id(file_id))
        return self.read_source_by_uri(uri)

    def read_bytes_by_id(self, file_id: FileId) -> bytes:
        uri = self.full_id_to_uri(self.fill_id(file_id))
        return self._workspace.read_bytes(uri)

    def __repr__(self) -> str:
        return f"Project(current={self._current!r}, workspace=...)"