"""Estimates the download size of an HLS media playlist from a sample of its segments."""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional

from ..models import SizeEstimate
from ..utils.formatting import round_half_up
from ..utils.http_client import FetchError, Headers, HttpClient
from ..utils.url_utils import join_to_directory

DEFAULT_SAMPLE_SIZE = 5
CONTENT_RANGE_PATTERN = re.compile(r"bytes \d+-\d+/(\d+)")

# (index, sample_count, segment_url, size or None)
ProgressCallback = Callable[[int, int, str, Optional[int]], None]


def list_segment_urls(text: str, playlist_url: str) -> List[str]:
    """Returns every segment reference of a media playlist as an absolute URL."""

    segment_urls = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        segment_urls.append(join_to_directory(playlist_url, line))
    return segment_urls


def content_length_from(headers: Headers) -> Optional[int]:
    value = headers.get("Content-Length")
    if value is None:
        return None
    try:
        size = int(value.strip())
    except ValueError:
        return None
    return size if size > 0 else None


def total_from_content_range(headers: Headers) -> Optional[int]:
    value = headers.get("Content-Range")
    if not value:
        return None
    match = CONTENT_RANGE_PATTERN.search(value)
    if not match:
        return None
    total = int(match.group(1))
    return total if total > 0 else None


def extrapolate(sizes: List[int], total_segments: int) -> SizeEstimate:
    """Scales the average sampled size up to the full segment count."""

    if not sizes:
        return SizeEstimate(total_bytes=None, sampled_segments=0, total_segments=total_segments)
    average = sum(sizes) / len(sizes)
    return SizeEstimate(
        total_bytes=round_half_up(average * total_segments),
        sampled_segments=len(sizes),
        total_segments=total_segments,
    )


class SizeEstimator:
    """Probes the first few segments of a media playlist one at a time."""

    def __init__(
        self,
        http_client: HttpClient,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        if sample_size < 1:
            raise ValueError("sample_size must be at least 1")
        self._http_client = http_client
        self.sample_size = sample_size
        self.progress_callback = progress_callback

    def estimate(self, media_playlist_url: str) -> SizeEstimate:
        try:
            text = self._http_client.fetch_text(media_playlist_url)
        except FetchError as exc:
            logging.warning("Could not fetch media playlist %s: %s", media_playlist_url, exc)
            return SizeEstimate()

        segment_urls = list_segment_urls(text, media_playlist_url)
        sample = segment_urls[: self.sample_size]
        sizes: List[int] = []
        for index, segment_url in enumerate(sample):
            size = self.measure_remote_size(segment_url)
            self._report(index, len(sample), segment_url, size)
            if size is not None:
                sizes.append(size)
        return self._finish(media_playlist_url, sizes, len(segment_urls))

    async def estimate_async(self, media_playlist_url: str) -> SizeEstimate:
        try:
            text = await self._http_client.fetch_text_async(media_playlist_url)
        except FetchError as exc:
            logging.warning("Could not fetch media playlist %s: %s", media_playlist_url, exc)
            return SizeEstimate()

        segment_urls = list_segment_urls(text, media_playlist_url)
        sample = segment_urls[: self.sample_size]
        sizes: List[int] = []
        for index, segment_url in enumerate(sample):
            size = await self.measure_remote_size_async(segment_url)
            self._report(index, len(sample), segment_url, size)
            if size is not None:
                sizes.append(size)
        return self._finish(media_playlist_url, sizes, len(segment_urls))

    def measure_remote_size(self, url: str) -> Optional[int]:
        """HEAD first, then a one-byte ranged GET; ``None`` when neither reveals a size."""

        try:
            size = content_length_from(self._http_client.head(url))
        except FetchError:
            size = None
        if size is not None:
            return size

        try:
            size = total_from_content_range(self._http_client.get_range(url, 0, 0))
        except FetchError:
            size = None
        if size is None:
            logging.debug("Size of segment %s is unknown", url)
        return size

    async def measure_remote_size_async(self, url: str) -> Optional[int]:
        try:
            size = content_length_from(await self._http_client.head_async(url))
        except FetchError:
            size = None
        if size is not None:
            return size

        try:
            size = total_from_content_range(await self._http_client.get_range_async(url, 0, 0))
        except FetchError:
            size = None
        if size is None:
            logging.debug("Size of segment %s is unknown", url)
        return size

    def _report(self, index: int, count: int, segment_url: str, size: Optional[int]) -> None:
        logging.debug("Probed segment %s/%s %s -> %s", index + 1, count, segment_url, size)
        if self.progress_callback:
            self.progress_callback(index, count, segment_url, size)

    def _finish(self, media_playlist_url: str, sizes: List[int], total_segments: int) -> SizeEstimate:
        estimate = extrapolate(sizes, total_segments)
        if not estimate.is_known:
            logging.info("No segment size could be determined for %s", media_playlist_url)
        return estimate
