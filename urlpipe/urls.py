"""Small URL helpers shared by transforms and the CLI."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, unquote, urlsplit

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_HOSTNAME_FORBIDDEN = set("/?#@\\")


def split_absolute(value: str) -> SplitResult | None:
    """Split ``value`` as an absolute URL with a host, or return None."""
    try:
        parts = urlsplit(value)
        # .port raises on a malformed port, so touch it here
        parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def is_valid_url(value: str) -> bool:
    return split_absolute(value) is not None


def strict_unquote(segment: str) -> str | None:
    """Percent-decode ``segment``, returning None on a bad escape or invalid UTF-8."""
    if _BAD_ESCAPE_RE.search(segment):
        return None
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError:
        return None


def is_plausible_hostname(value: str) -> bool:
    """A bare host: no whitespace, delimiters, or port. IPv6 literals must be bracketed."""
    if not value:
        return False
    if any(c.isspace() or c in _HOSTNAME_FORBIDDEN for c in value):
        return False
    if value.startswith("["):
        return value.endswith("]") and "]" not in value[:-1]
    return ":" not in value and "]" not in value


def with_hostname(url: str, parts: SplitResult, hostname: str) -> str | None:
    """Splice ``hostname`` into ``url``, leaving every other character as written.

    ``parts`` is ``urlsplit(url)``. Returns None when the netloc cannot be
    located in ``url`` (urlsplit drops tabs and newlines).
    """
    userinfo, at, hostport = parts.netloc.rpartition("@")
    if hostport.startswith("["):
        _, _, rest = hostport.partition("]")
        port = rest[1:] if rest.startswith(":") else None
    else:
        _, colon, port = hostport.partition(":")
        port = port if colon else None
    netloc = hostname if port is None else f"{hostname}:{port}"

    start = url.find("//") + 2
    end = start + len(parts.netloc)
    if start < 2 or url[start:end] != parts.netloc:
        return None
    return f"{url[:start]}{userinfo}{at}{netloc}{url[end:]}"
