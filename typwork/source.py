"""Source documents and the mapping of editor positions onto them."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from .package import FileId

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

Position = tuple[int, int]
LspRange = tuple[Position, Position]


class PositionEncoding(enum.Enum):
    """How the character part of an editor position counts text."""

    UTF8 = "utf-8"
    UTF16 = "utf-16"

    def width(self, char: str) -> int:
        """Number of code units `char` takes in this encoding."""
        if self is PositionEncoding.UTF8:
            return len(char.encode("utf-8"))
        return 2 if ord(char) > 0xFFFF else 1


@dataclass(frozen=True)
class TextChange:
    """A change sent by the editor: a replaced range, or the whole text if `range` is None."""

    text: str
    range: LspRange | None = None


def _line_spans(text: str) -> list[tuple[int, int]]:
    spans = []
    line_start = 0
    for match in _LINE_BREAK.finditer(text):
        spans.append((line_start, match.start()))
        line_start = match.end()
    spans.append((line_start, len(text)))
    return spans


def _position_to_offset(
    text: str,
    spans: list[tuple[int, int]],
    position: Position,
    encoding: PositionEncoding,
) -> int:
    line, character = position
    if line >= len(spans):
        return len(text)
    start, end = spans[line]
    units = 0
    for offset, char in enumerate(text[start:end], start):
        if units >= character:
            return offset
        units += encoding.width(char)
    return end


def range_to_offsets(
    text: str, lsp_range: LspRange, encoding: PositionEncoding
) -> tuple[int, int]:
    """Convert an editor range of `(line, character)` pairs to string offsets in `text`.

    Positions past the end of a line or of the text are clamped to that end.
    """
    spans = _line_spans(text)
    start, end = lsp_range
    return (
        _position_to_offset(text, spans, start, encoding),
        _position_to_offset(text, spans, end, encoding),
    )


@dataclass
class Source:
    """The text of a source file together with the ID it is known by."""

    file_id: FileId
    text: str

    def edit(self, start: int, end: int, replacement: str) -> None:
        """Replace the text between the offsets `start` and `end`."""
        if not 0 <= start <= end <= len(self.text):
            raise ValueError(
                f"range {start}..{end} is out of bounds for text of length {len(self.text)}"
            )
        self.text = self.text[:start] + replacement + self.text[end:]

    def replace(self, text: str) -> None:
        """Replace the whole text."""
        self.text = text