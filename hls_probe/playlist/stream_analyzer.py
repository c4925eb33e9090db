"""Ties parsing and size estimation together for a single root playlist URL."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from ..models import ParseFailure, ParseFailureReason, StreamReport, VariantReport
from ..utils.http_client import HttpClient
from .multivariant_parser import PlaylistParser
from .size_estimator import SizeEstimator


class StreamAnalyzer:
    """Parses a playlist, then estimates each variant one after another.

    When the URL is not a multivariant playlist it is treated as a direct
    media playlist and estimated as a single stream.
    """

    def __init__(
        self,
        http_client: HttpClient,
        parser: Optional[PlaylistParser] = None,
        estimator: Optional[SizeEstimator] = None,
    ) -> None:
        self.parser = parser or PlaylistParser(http_client)
        self.estimator = estimator or SizeEstimator(http_client)

    def analyze(self, url: str, estimate_sizes: bool = True) -> StreamReport:
        result = self.parser.parse(url)
        report = self._start_report(url, result)
        if not estimate_sizes or report.failure is ParseFailureReason.UNREACHABLE:
            return report

        if report.failure is ParseFailureReason.NOT_MULTIVARIANT:
            report.single_stream = self.estimator.estimate(url)
            return report

        for variant_report in report.variants:
            logging.info("Checking %s ...", variant_report.variant.quality_label)
            variant_report.estimate = self.estimator.estimate(variant_report.variant.media_playlist_url)
        return report

    async def analyze_async(self, url: str, estimate_sizes: bool = True) -> StreamReport:
        result = await self.parser.parse_async(url)
        report = self._start_report(url, result)
        if not estimate_sizes or report.failure is ParseFailureReason.UNREACHABLE:
            return report

        if report.failure is ParseFailureReason.NOT_MULTIVARIANT:
            report.single_stream = await self.estimator.estimate_async(url)
            return report

        for variant_report in report.variants:
            logging.info("Checking %s ...", variant_report.variant.quality_label)
            variant_report.estimate = await self.estimator.estimate_async(
                variant_report.variant.media_playlist_url
            )
        return report

    async def analyze_many(self, urls: Iterable[str], estimate_sizes: bool = True) -> List[StreamReport]:
        """Analyzes independent URLs concurrently; results keep the input order."""

        tasks = [self.analyze_async(url, estimate_sizes=estimate_sizes) for url in urls]
        return list(await asyncio.gather(*tasks))

    @staticmethod
    def _start_report(url: str, result) -> StreamReport:
        if isinstance(result, ParseFailure):
            return StreamReport(source_url=url, failure=result.reason)
        return StreamReport(
            source_url=url,
            variants=[VariantReport(variant=variant) for variant in result],
        )
