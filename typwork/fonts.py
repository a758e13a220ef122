"""Font discovery: a book of font descriptions and lazily loaded font data."""

from __future__ import annotations

import logging
import os
import struct
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .errors import FsError
from .local import read_path_raw

logger = logging.getLogger(__name__)

_SFNT_VERSIONS = frozenset({b"\x00\x01\x00\x00", b"OTTO", b"true", b"typ1"})
_COLLECTION_TAG = b"ttcf"
_FONT_SUFFIXES = frozenset({".ttf", ".otf", ".ttc", ".otc"})

_FAMILY = 1
_SUBFAMILY = 2
_TYPOGRAPHIC_FAMILY = 16
_TYPOGRAPHIC_SUBFAMILY = 17
_ENGLISH_US = 0x409


class FontError(Exception):
    """A font could not be loaded."""


class FontParseError(FontError):
    def __init__(self, message: str = "failed to parse font") -> None:
        super().__init__(message)


class _Malformed(Exception):
    pass


@dataclass(frozen=True)
class FontInfo:
    """What the book knows about a font face."""

    family: str
    style: str = ""
    weight: int = 400
    italic: bool = False


@dataclass(frozen=True)
class Font:
    """A parsed face: the font file's data, the face's index in it, and its description."""

    data: bytes = field(repr=False)
    index: int
    info: FontInfo

    @classmethod
    def parse(cls, data: bytes, index: int = 0) -> Font:
        offsets = _face_offsets(data)
        if not 0 <= index < len(offsets):
            raise FontParseError()
        info = _parse_face(data, offsets[index])
        if info is None:
            raise FontParseError()
        return cls(bytes(data), index, info)


def _unpack(fmt: str, data: bytes, offset: int) -> tuple[int, ...]:
    try:
        return struct.unpack_from(fmt, data, offset)
    except struct.error as err:
        raise _Malformed(str(err)) from err


def _face_offsets(data: bytes) -> list[int]:
    tag = data[:4]
    if tag == _COLLECTION_TAG:
        try:
            (count,) = _unpack(">I", data, 8)
            return list(_unpack(f">{count}I", data, 12))
        except _Malformed:
            return []
    if tag in _SFNT_VERSIONS:
        return [0]
    return []


def _tables(data: bytes, offset: int) -> dict[bytes, bytes]:
    if data[offset : offset + 4] not in _SFNT_VERSIONS:
        raise _Malformed("not an sfnt face")
    (num_tables,) = _unpack(">H", data, offset + 4)
    tables = {}
    for record in range(num_tables):
        start = offset + 12 + 16 * record
        tag = data[start : start + 4]
        _checksum, table_offset, length = _unpack(">III", data, start + 4)
        if table_offset + length > len(data):
            raise _Malformed(f"table {tag!r} runs past the end of the data")
        tables[tag] = data[table_offset : table_offset + length]
    return tables


def _name_priority(platform: int, encoding: int, language: int) -> tuple[int, str] | None:
    if platform == 3:
        return (0 if language == _ENGLISH_US else 2), "utf-16-be"
    if platform == 0:
        return 1, "utf-16-be"
    if platform == 1 and encoding == 0:
        return 3, "mac_roman"
    return None


def _names(table: bytes) -> dict[int, str]:
    _format, count, string_offset = _unpack(">HHH", table, 0)
    best: dict[int, tuple[int, str]] = {}
    for record in range(count):
        platform, encoding, language, name_id, length, offset = _unpack(
            ">6H", table, 6 + 12 * record
        )
        choice = _name_priority(platform, encoding, language)
        if choice is None:
            continue
        priority, codec = choice
        start = string_offset + offset
        raw = table[start : start + length]
        if len(raw) != length:
            continue
        try:
            text = raw.decode(codec)
        except UnicodeDecodeError:
            continue
        if name_id not in best or priority < best[name_id][0]:
            best[name_id] = (priority, text)
    return {name_id: text for name_id, (_, text) in best.items()}


def _parse_face(data: bytes, offset: int) -> FontInfo | None:
    try:
        tables = _tables(data, offset)
        name_table = tables.get(b"name")
        if name_table is None:
            return None
        names = _names(name_table)
        family = names.get(_TYPOGRAPHIC_FAMILY) or names.get(_FAMILY)
        if not family:
            return None
        style = names.get(_TYPOGRAPHIC_SUBFAMILY) or names.get(_SUBFAMILY) or ""
        weight, italic = 400, False
        os2 = tables.get(b"OS/2")
        head = tables.get(b"head")
        if os2 is not None and len(os2) >= 64:
            (weight,) = _unpack(">H", os2, 4)
            (selection,) = _unpack(">H", os2, 62)
            italic = bool(selection & 0x0001 or selection & 0x0200)
        elif head is not None and len(head) >= 46:
            (mac_style,) = _unpack(">H", head, 44)
            weight = 700 if mac_style & 0x0001 else 400
            italic = bool(mac_style & 0x0002)
        return FontInfo(family, style, weight, italic)
    except _Malformed:
        return None


def _scan(data: bytes) -> Iterator[tuple[int, FontInfo]]:
    for index, offset in enumerate(_face_offsets(data)):
        info = _parse_face(data, offset)
        if info is not None:
            yield index, info


def read_font_infos(data: bytes) -> list[FontInfo]:
    """Descriptions of every valid face in a font file or collection."""
    return [info for _, info in _scan(data)]


@dataclass
class _FontSlot:
    """Where a face lives on disk, and the face once it has been loaded."""

    path: Path
    index: int
    font: Font | None = None

    def get_font(self) -> Font:
        if self.font is None:
            self.font = Font.parse(read_path_raw(self.path), self.index)
        return self.font

    def invalidate(self) -> None:
        self.font = None


class FontManager:
    """A book of known fonts; font data is read from disk when first asked for."""

    def __init__(self, book: Iterable[FontInfo] = (), slots: Iterable[_FontSlot] = ()) -> None:
        self._book = tuple(book)
        self._slots = list(slots)

    @staticmethod
    def builder() -> FontBuilder:
        return FontBuilder()

    @property
    def book(self) -> tuple[FontInfo, ...]:
        return self._book

    def font(self, font_id: int) -> Font | None:
        """The font at position `font_id` in the book, or None if it cannot be loaded."""
        if not 0 <= font_id < len(self._slots):
            return None
        try:
            return self._slots[font_id].get_font()
        except (FsError, FontError) as err:
            logger.error("failed to load font %d: %s", font_id, err)
            return None

    def clear(self) -> None:
        """Forget loaded font data so it is read again on next use."""
        for slot in self._slots:
            slot.invalidate()

    def __repr__(self) -> str:
        return f"FontManager(fonts={len(self._slots)})"


def _system_font_dirs() -> list[Path]:
    home = Path.home()
    if sys.platform == "win32":
        dirs = [Path(os.environ.get("WINDIR", r"C:\Windows"), "Fonts")]
        local = os.environ.get("LOCALAPPDATA")
        if local:
            dirs.append(Path(local, "Microsoft", "Windows", "Fonts"))
    elif sys.platform == "darwin":
        dirs = [
            Path("/System/Library/Fonts"),
            Path("/Library/Fonts"),
            Path("/Network/Library/Fonts"),
            home / "Library" / "Fonts",
        ]
    else:
        data_home = Path(os.environ.get("XDG_DATA_HOME") or home / ".local" / "share")
        data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
        dirs = [data_home / "fonts", home / ".fonts"]
        dirs.extend(Path(entry, "fonts") for entry in data_dirs.split(os.pathsep) if entry)
    return list(dict.fromkeys(dirs))


def _font_files(path: Path) -> Iterator[Path]:
    if not path.is_dir():
        yield path
        return
    for dirpath, dirnames, filenames in os.walk(path, followlinks=True):
        dirnames.sort()
        for name in sorted(filenames):
            if Path(name).suffix.lower() in _FONT_SUFFIXES:
                yield Path(dirpath, name)


class FontBuilder:
    """Collects fonts and builds a `FontManager`."""

    def __init__(self) -> None:
        self._book: list[FontInfo] = []
        self._slots: list[_FontSlot] = []

    def build(self) -> FontManager:
        return FontManager(self._book, self._slots)

    def with_paths(self, paths: Iterable[str | os.PathLike[str]]) -> FontBuilder:
        """Add the faces in the given font files, and in font files under given directories."""
        for entry in paths:
            for path in _font_files(Path(entry)):
                try:
                    data = path.read_bytes()
                except OSError as err:
                    logger.debug("skipping font file %s: %s", path, err)
                    continue
                for index, info in _scan(data):
                    self._book.append(info)
                    self._slots.append(_FontSlot(path, index))
        return self

    def with_system(self) -> FontBuilder:
        """Add the fonts found in the system's font directories."""
        return self.with_paths(path for path in _system_font_dirs() if path.is_dir())