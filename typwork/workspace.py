"""The directories open in the editor, their files and the documents being edited."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .fonts import FontManager
from .fs_manager import FsManager
from .package import FullFileId
from .package_manager import PackageManager
from .source import PositionEncoding, Source, TextChange

logger = logging.getLogger(__name__)


class Workspace:
    """Files, fonts and packages of the workspace folders given by their root URIs.

    Without `fonts`, the system's fonts are searched.
    """

    def __init__(
        self,
        root_uris: Iterable[str] = (),
        *,
        fonts: FontManager | None = None,
        external: Any = None,
    ) -> None:
        self._fs = FsManager()
        self._fonts = fonts if fonts is not None else FontManager.builder().with_system().build()
        self._packages = PackageManager(root_uris, external)

    @property
    def font_manager(self) -> FontManager:
        return self._fonts

    @property
    def package_manager(self) -> PackageManager:
        return self._packages

    def register_files(self) -> None:
        """Register the sources found in every current package."""
        for package in self._packages.current():
            logger.debug("registering files in package %r", package)
            self._fs.register_files(package.root)

    def uri(self, full_id: FullFileId) -> str:
        package = self._packages.package(full_id.package)
        return package.vpath_to_uri(full_id.vpath)

    def full_id(self, uri: str) -> FullFileId:
        return self._packages.full_id(uri)

    def read_bytes(self, uri: str) -> bytes:
        return self._fs.read_bytes(uri, self._packages)

    def read_source(self, uri: str) -> Source:
        return self._fs.read_source(uri, self._packages)

    def write_raw(self, uri: str, data: bytes) -> None:
        """Write raw data to a file.

        A cached copy of the file is not updated and stays stale until invalidated.
        """
        self._fs.write_raw(uri, data)

    def known_uris(self) -> set[str]:
        return self._fs.known_uris()

    def open_lsp(self, uri: str, text: str) -> None:
        self._fs.open_lsp(uri, text, self._packages)

    def close_lsp(self, uri: str) -> None:
        self._fs.close_lsp(uri)

    def edit_lsp(
        self,
        uri: str,
        changes: Iterable[TextChange],
        position_encoding: PositionEncoding,
    ) -> None:
        self._fs.edit_lsp(uri, changes, position_encoding)

    def new_local(self, uri: str) -> None:
        self._fs.new_local(uri)

    def invalidate_local(self, uri: str) -> None:
        self._fs.invalidate_local(uri)

    def delete_local(self, uri: str) -> None:
        self._fs.delete_local(uri)

    def handle_workspace_folders_change_event(
        self, added: Iterable[str], removed: Iterable[str]
    ) -> None:
        self._packages.handle_change_event(added, removed)
        # Which package a URI belongs to may have changed, so cached IDs are stale.
        self.clear()

    def clear(self) -> None:
        self._fonts.clear()
        self._fs.clear()
        self.register_files()

    def __repr__(self) -> str:
        return f"Workspace(fs={self._fs!r}, fonts={self._fonts!r})"