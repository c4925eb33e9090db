"""URL helpers for resolving playlist references."""

from __future__ import annotations

import re
from urllib.parse import urljoin

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def has_scheme(reference: str) -> bool:
    return bool(SCHEME_PATTERN.match(reference))


def resolve_reference(base_url: str, reference: str) -> str:
    """Resolves ``reference`` against ``base_url`` per RFC 3986 unless it is already absolute."""

    if has_scheme(reference):
        return reference
    return urljoin(base_url, reference)


def directory_of(url: str) -> str:
    """Returns ``url`` up to and including its last ``/``."""

    return url[: url.rfind("/") + 1]


def join_to_directory(playlist_url: str, reference: str) -> str:
    """Prefixes a relative segment reference with the playlist's directory."""

    if has_scheme(reference):
        return reference
    return directory_of(playlist_url) + reference
