"""Conversions between LSP positions and text offsets, and applying edits.

Offsets are indices into Python strings; LSP character positions are
counted in UTF-16 code units.
"""

from __future__ import annotations

from .basic import Position, TextDocumentContentChangeEvent
from .kinds import OffsetEncoding
from .logger import log

__all__ = ["lsp_length", "position_to_offset", "offset_to_position", "apply_change"]

_ENCODING = OffsetEncoding.UTF16


def _utf16_units(char: str) -> int:
    # Characters outside the basic multilingual plane take a surrogate pair.
    return 2 if ord(char) > 0xFFFF else 1


def lsp_length(code: str) -> int:
    """Return the length of a string in UTF-16 code units."""
    return sum(_utf16_units(char) for char in code)


def _measure_units(line: str, units: int) -> tuple[int, bool]:
    """Return the index reached after ``units`` code units and whether it is exact."""
    if units <= 0:
        return 0, units >= 0
    index = 0
    for char in line:
        index += 1
        units -= _utf16_units(char)
        if units <= 0:
            # A negative remainder means the offset splits a surrogate pair.
            return index, units == 0
    return index, False


def position_to_offset(
    code: str, position: Position, allow_columns_beyond_line_length: bool = False
) -> int:
    """Return the string index a position refers to.

    Raises ValueError when the position is negative, the line does not exist,
    or the column is not valid for the line (unless columns beyond the end of
    the line are allowed, in which case the end of the line is returned).
    """
    if position.line < 0:
        raise ValueError(f"Line value can't be negative ({position.line})")
    if position.character < 0:
        raise ValueError(f"Character value can't be negative ({position.character})")
    start = 0
    for _ in range(position.line):
        newline = code.find("\n", start)
        if newline == -1:
            raise ValueError(f"Line value is out of range ({position.line})")
        start = newline + 1
    end = code.find("\n", start)
    line = code[start:] if end == -1 else code[start:end]
    index, valid = _measure_units(line, position.character)
    if not valid and not allow_columns_beyond_line_length:
        raise ValueError(
            f"{_ENCODING} offset {position.character} is invalid "
            f"for line {position.line}"
        )
    return start + index


def offset_to_position(code: str, offset: int) -> Position:
    """Return the position of a string index, clamped to the string."""
    offset = max(0, min(len(code), offset))
    before = code[:offset]
    start_of_line = before.rfind("\n") + 1
    return Position(before.count("\n"), lsp_length(before[start_of_line:]))


def _locate(contents: str, position: Position) -> tuple[str, int]:
    """Find a position, adding a final newline when an editor points past it.

    Some editors refer to the start of the line after a document that does
    not end in a newline; such a newline is inferred rather than failing.
    """
    try:
        return contents, position_to_offset(contents, position)
    except ValueError:
        if (
            contents.endswith("\n")
            or position.character != 0
            or position.line != contents.count("\n") + 1
        ):
            raise
    log("Editor sent invalid change coordinates, inferring newline at EOF")
    contents += "\n"
    return contents, len(contents)


def apply_change(contents: str, change: TextDocumentContentChangeEvent) -> str:
    """Return the contents with one change applied; raises ValueError if invalid."""
    if change.range is None:
        return change.text

    start = change.range.start
    contents, start_index = _locate(contents, start)
    end = change.range.end
    contents, end_index = _locate(contents, end)

    if end_index < start_index:
        raise ValueError(
            f"Range's end position ({end}) is before start position ({start})"
        )

    computed = lsp_length(contents[start_index:end_index])
    if change.range_length is not None and computed != change.range_length:
        raise ValueError(
            f"Change's rangeLength ({change.range_length}) doesn't match the "
            f"computed range length ({computed})."
        )
    return contents[:start_index] + change.text + contents[end_index:]