"""Share link / query string <-> flat parameter mapping."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit


def parse_query(qs: str) -> dict[str, str]:
    """Parse a query string, keeping blank values. The first occurrence of a name wins."""
    params: dict[str, str] = {}
    for name, value in parse_qsl(qs.lstrip("?"), keep_blank_values=True):
        params.setdefault(name, value)
    return params


def params_from_link(link: str) -> dict[str, str]:
    """Extract parameters from a full share link or a bare query string."""
    link = link.strip()
    parts = urlsplit(link)
    if parts.scheme or link.startswith(("/", "?")):
        return parse_query(parts.query)
    return parse_query(link)


def build_query(params: Mapping[str, str]) -> str:
    return urlencode(list(params.items()))


def build_link(base: str, params: Mapping[str, str]) -> str:
    """Append ``params`` to ``base``; an empty mapping yields ``base`` unchanged."""
    if not params:
        return base
    return f"{base}?{build_query(params)}"
