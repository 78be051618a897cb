"""URIs with pluggable schemes, and percent-encoding of their parts."""

from __future__ import annotations

import abc
import os
import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote_from_bytes, unquote_to_bytes

__all__ = [
    "URIError",
    "URIScheme",
    "FileSystemScheme",
    "URI",
    "register_scheme",
    "find_scheme",
    "percent_encode",
    "percent_decode",
    "is_valid_scheme",
]

_WINDOWS = os.name == "nt"
_SEPARATORS = "/\\" if _WINDOWS else "/"
_SCHEME_TAIL = re.compile(r"[A-Za-z0-9+.\-]*")
_POSIX_BACKSLASH = re.compile(r"\\\\|\\")


class URIError(ValueError):
    """Raised when a URI cannot be parsed, created or resolved."""


def percent_encode(content: str) -> str:
    """Escape everything except unreserved characters, ``/`` and ``:``."""
    return quote_from_bytes(content.encode("utf-8", "surrogateescape"), safe="/:")


def percent_decode(content: str) -> str:
    """Decode ``%XX`` escapes; malformed escapes are kept as they are."""
    data = unquote_to_bytes(content.encode("utf-8", "surrogateescape"))
    return data.decode("utf-8", "surrogateescape")


def is_valid_scheme(scheme: str) -> bool:
    """Whether a scheme is a letter followed by letters, digits, ``+``, ``.`` or ``-``."""
    if not scheme or not (scheme[0].isascii() and scheme[0].isalpha()):
        return False
    return _SCHEME_TAIL.fullmatch(scheme, 1) is not None


def _is_windows_path(path: str) -> bool:
    return len(path) > 1 and path[0].isascii() and path[0].isalpha() and path[1] == ":"


def _is_network_path(path: str) -> bool:
    return len(path) > 2 and path[0] == path[1] and path[0] in _SEPARATORS


def _root_name(path: str) -> str:
    if (
        len(path) > 2
        and path[0] in _SEPARATORS
        and path[1] == path[0]
        and path[2] not in _SEPARATORS
    ):
        ends = [i for i in (path.find(sep, 2) for sep in _SEPARATORS) if i != -1]
        return path[: min(ends, default=len(path))]
    if _WINDOWS and _is_windows_path(path):
        return path[:2]
    return ""


def _native(path: str) -> str:
    if _WINDOWS:
        return path.replace("/", "\\")
    return _POSIX_BACKSLASH.sub(lambda m: m.group(0) if len(m.group(0)) == 2 else "/", path)


def _convert_to_slash(path: str) -> str:
    return path.replace("\\", "/") if _WINDOWS else path


def _is_absolute(path: str) -> bool:
    return os.path.isabs(path)


class URIScheme(abc.ABC):
    """Converts between absolute paths and URIs of one scheme."""

    @abc.abstractmethod
    def get_absolute_path(self, authority: str, body: str, hint_path: str) -> str:
        """Return the absolute path a URI with this scheme refers to."""

    @abc.abstractmethod
    def uri_from_absolute_path(self, absolute_path: str) -> URI:
        """Return the URI of this scheme for an absolute path."""


class FileSystemScheme(URIScheme):
    """The ``file`` scheme: paths in the local file system."""

    def get_absolute_path(self, authority: str, body: str, hint_path: str) -> str:
        if not body.startswith("/"):
            raise URIError(
                "File scheme: expect body to be an absolute path starting "
                f"with '/': {body}"
            )
        path = ""
        if authority:
            path = "//" + authority
        elif _is_windows_path(body[1:]):
            body = body[1:]
        return _native(path + body)

    def uri_from_absolute_path(self, absolute_path: str) -> URI:
        body = ""
        authority = ""
        root = _root_name(absolute_path)
        if _is_network_path(root):
            authority = root[2:]
            absolute_path = absolute_path[len(root):]
        elif _is_windows_path(root):
            body = "/"
        body += _convert_to_slash(absolute_path)
        return URI("file", authority, body)


_registry: dict[str, Callable[[], URIScheme]] = {}


def register_scheme(name: str, scheme_factory: Callable[[], URIScheme]) -> None:
    """Make a scheme available by name; it is consulted before ``file``."""
    _registry[name] = scheme_factory


def find_scheme(name: str) -> URIScheme:
    """Return an instance of the named scheme."""
    if name == "file":
        return FileSystemScheme()
    factory = _registry.get(name)
    if factory is None:
        raise URIError(f"Can't find scheme: {name}")
    return factory()


@dataclass(frozen=True)
class URI:
    """A URI split into scheme, authority and decoded body."""

    scheme: str
    authority: str = ""
    body: str = ""

    def __str__(self) -> str:
        result = percent_encode(self.scheme) + ":"
        if not self.authority and not self.body:
            return result
        if self.authority or self.body.startswith("/"):
            result += "//" + percent_encode(self.authority)
        return result + percent_encode(self.body)

    @classmethod
    def parse(cls, text: str) -> URI:
        """Parse a URI string, decoding its percent escapes."""
        scheme_text, colon, rest = text.partition(":")
        if not colon:
            raise URIError(f"Scheme must be provided in URI: {text}")
        scheme = percent_decode(scheme_text)
        if not is_valid_scheme(scheme):
            raise URIError(f"Invalid scheme: {scheme_text} (decoded: {scheme})")
        authority = ""
        if rest.startswith("//"):
            rest = rest[2:]
            slash = rest.find("/")
            if slash == -1:
                authority, rest = rest, ""
            else:
                authority, rest = rest[:slash], rest[slash:]
            authority = percent_decode(authority)
        return cls(scheme, authority, percent_decode(rest))

    @classmethod
    def create(cls, absolute_path: str, scheme: str | None = None) -> URI:
        """Create a URI for an absolute path.

        With a scheme name, that scheme is used. Without one, the first
        registered scheme that accepts the path is used, then ``file``.
        """
        if scheme is not None:
            if not _is_absolute(absolute_path):
                raise URIError(f"Not a valid absolute path: {absolute_path}")
            return find_scheme(scheme).uri_from_absolute_path(absolute_path)
        if not _is_absolute(absolute_path):
            raise ValueError(f"Not a valid absolute path: {absolute_path}")
        for factory in list(_registry.values()):
            try:
                return factory().uri_from_absolute_path(absolute_path)
            except URIError:
                continue
        return cls.create_file(absolute_path)

    @classmethod
    def create_file(cls, absolute_path: str) -> URI:
        """Create a ``file`` URI for a path."""
        return FileSystemScheme().uri_from_absolute_path(absolute_path)

    @classmethod
    def resolve(cls, uri: URI | str, hint_path: str = "") -> str:
        """Return the absolute path a URI (or URI string) refers to."""
        if isinstance(uri, str):
            uri = cls.parse(uri)
        return find_scheme(uri.scheme).get_absolute_path(
            uri.authority, uri.body, hint_path
        )

    @classmethod
    def resolve_path(cls, absolute_path: str, hint_path: str = "") -> str:
        """Canonicalize a path through the first registered scheme that accepts it."""
        if not _is_absolute(absolute_path):
            raise ValueError(f"Not a valid absolute path: {absolute_path}")
        for factory in list(_registry.values()):
            scheme = factory()
            try:
                uri = scheme.uri_from_absolute_path(absolute_path)
            except URIError:
                continue
            return scheme.get_absolute_path(uri.authority, uri.body, hint_path)
        return absolute_path