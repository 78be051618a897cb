"""Thread-safe store of the contents of files open in the editor."""

from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .logger import elog, log

__all__ = ["Draft", "DraftStore", "increment_version"]

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_TRAILING_DIGITS = re.compile(r"\d+$")
_DECIMAL = re.compile(r"-?[0-9]+")
_CHUNKS = re.compile(r"\d+|\D+")


@dataclass(frozen=True)
class Draft:
    """Contents of a file together with its opaque version string."""

    contents: str
    version: str


@dataclass
class _Entry:
    draft: Draft
    mtime: float


def increment_version(version: str) -> str:
    """Bump the numeric suffix of a version, appending ``0`` if there is none."""
    match = _TRAILING_DIGITS.search(version)
    if match is None:
        return version + "0"
    digits = match.group(0)
    bumped = str(int(digits) + 1).zfill(len(digits))
    return version[: match.start()] + bumped


def _numeric_key(text: str) -> list[tuple[int, int, str]]:
    return [
        (0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk)
        for chunk in _CHUNKS.findall(text)
    ]


def _compare_numeric(a: str, b: str) -> int:
    ka, kb = _numeric_key(a), _numeric_key(b)
    return (ka > kb) - (ka < kb)


class DraftStore:
    """Maps file paths to their latest in-editor contents."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._drafts: dict[str, _Entry] = {}

    def get_draft(self, path: str) -> Draft | None:
        """Return the draft for a path, or None if it is not open."""
        with self._lock:
            entry = self._drafts.get(path)
            return entry.draft if entry is not None else None

    def active_files(self) -> list[str]:
        """Return the paths of all open files."""
        with self._lock:
            return list(self._drafts)

    def add_draft(self, path: str, version: str, contents: str) -> str:
        """Store new contents for a path and return the resulting version."""
        with self._lock:
            entry = self._drafts.get(path)
            old_version = entry.draft.version if entry is not None else ""
            if version:
                if _compare_numeric(version, old_version) <= 0:
                    log("File version went from {0} to {1}", old_version, version)
                new_version = version
            else:
                new_version = increment_version(old_version)
            self._drafts[path] = _Entry(Draft(contents, new_version), time.time())
            return new_version

    def remove_draft(self, path: str) -> None:
        """Forget a path; unknown paths are ignored."""
        with self._lock:
            self._drafts.pop(path, None)

    def snapshot(self) -> Mapping[str, tuple[float, str]]:
        """Return a read-only view of path to (modification time, contents)."""
        with self._lock:
            return MappingProxyType(
                {path: (e.mtime, e.draft.contents) for path, e in self._drafts.items()}
            )

    @staticmethod
    def encode_version(version: int | None) -> str:
        """Encode an LSP integer version as an opaque string."""
        return "" if version is None else str(version)

    @staticmethod
    def decode_version(encoded: str) -> int | None:
        """Decode a version string back to an integer, if it is one."""
        if _DECIMAL.fullmatch(encoded):
            value = int(encoded)
            if _INT64_MIN <= value <= _INT64_MAX:
                return value
        if encoded:
            elog("unexpected non-numeric version {0}", encoded)
        return None