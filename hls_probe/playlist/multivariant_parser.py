"""Splits HLS multivariant playlists into their quality variants."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Optional, Union

from ..models import ParseFailure, ParseFailureReason, Resolution, Variant
from ..utils.http_client import FetchError, HttpClient
from ..utils.url_utils import resolve_reference

STREAM_INF_TAG = "#EXT-X-STREAM-INF:"
BANDWIDTH_PATTERN = re.compile(r"BANDWIDTH=(\d+)")
RESOLUTION_PATTERN = re.compile(r"RESOLUTION=(\d+)x(\d+)")

ParseResult = Union[List[Variant], ParseFailure]


class ScanState(Enum):
    IDLE = "idle"
    AWAITING_URI = "awaiting_uri"


class _PendingVariant:
    """Attributes read from a stream-info tag, waiting for their URI line."""

    def __init__(self, stream_info_line: str) -> None:
        self.stream_info_line = stream_info_line
        self.bandwidth = parse_bandwidth(stream_info_line)
        self.resolution = parse_resolution(stream_info_line)

    def complete(self, media_playlist_url: str) -> Variant:
        return Variant(
            stream_info_line=self.stream_info_line,
            media_playlist_url=media_playlist_url,
            bandwidth=self.bandwidth,
            resolution=self.resolution,
        )


class VariantScanner:
    """Two-state machine pairing each stream-info tag with the next URI line.

    A tag opens a pending variant (``AWAITING_URI``). The next non-comment line
    closes it and returns to ``IDLE``. A second tag before any URI replaces the
    pending one, and a tag still pending at end of input is dropped.
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        self.state = ScanState.IDLE
        self.variants: List[Variant] = []
        self._pending: Optional[_PendingVariant] = None

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()
        if not line:
            return
        if line.startswith(STREAM_INF_TAG):
            self._open(line)
        elif line.startswith("#"):
            return
        elif self.state is ScanState.AWAITING_URI:
            self._close(line)

    def finish(self) -> List[Variant]:
        if self.state is ScanState.AWAITING_URI:
            logging.debug("Dropping stream-info tag without URI at end of playlist: %s", self._pending.stream_info_line)
            self._pending = None
            self.state = ScanState.IDLE
        return self.variants

    def _open(self, line: str) -> None:
        if self.state is ScanState.AWAITING_URI:
            logging.debug("Dropping stream-info tag without URI: %s", self._pending.stream_info_line)
        self._pending = _PendingVariant(line)
        self.state = ScanState.AWAITING_URI

    def _close(self, uri: str) -> None:
        self.variants.append(self._pending.complete(resolve_reference(self.base_url, uri)))
        self._pending = None
        self.state = ScanState.IDLE


def parse_bandwidth(stream_info_line: str) -> Optional[int]:
    match = BANDWIDTH_PATTERN.search(stream_info_line)
    return int(match.group(1)) if match else None


def parse_resolution(stream_info_line: str) -> Optional[Resolution]:
    match = RESOLUTION_PATTERN.search(stream_info_line)
    if not match:
        return None
    return Resolution(width=int(match.group(1)), height=int(match.group(2)))


class PlaylistParser:
    """Fetches a multivariant playlist and returns its variants by ascending bandwidth."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http_client = http_client

    def parse(self, base_url: str) -> ParseResult:
        try:
            text = self._http_client.fetch_text(base_url)
        except FetchError as exc:
            logging.warning("Playlist %s is unreachable: %s", base_url, exc)
            return ParseFailure(reason=ParseFailureReason.UNREACHABLE)
        return self.parse_text(text, base_url)

    async def parse_async(self, base_url: str) -> ParseResult:
        try:
            text = await self._http_client.fetch_text_async(base_url)
        except FetchError as exc:
            logging.warning("Playlist %s is unreachable: %s", base_url, exc)
            return ParseFailure(reason=ParseFailureReason.UNREACHABLE)
        return self.parse_text(text, base_url)

    @staticmethod
    def parse_text(text: str, base_url: str) -> ParseResult:
        scanner = VariantScanner(base_url)
        for raw_line in text.splitlines():
            scanner.feed(raw_line)
        variants = scanner.finish()

        if not variants:
            logging.info("No variants found in %s; treating it as a single stream", base_url)
            return ParseFailure(reason=ParseFailureReason.NOT_MULTIVARIANT)
        # sorted() is stable, so equal bandwidths keep playlist order
        return sorted(variants, key=lambda variant: variant.sort_key)
