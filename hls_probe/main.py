from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

from .models import ParseFailureReason, SizeEstimate, StreamReport
from .playlist.compression import build_copy_command, derive_compression_profiles
from .playlist.size_estimator import DEFAULT_SAMPLE_SIZE, SizeEstimator
from .playlist.stream_analyzer import StreamAnalyzer
from .utils.formatting import format_bandwidth, format_bytes
from .utils.http_client import HttpClient

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List HLS variants and estimate their download sizes.")
    parser.add_argument("urls", nargs="+", metavar="URL", help="Multivariant or media playlist URL(s)")
    parser.add_argument(
        "--no-estimate",
        action="store_true",
        default=_env_bool("HLS_PROBE_NO_ESTIMATE"),
        help="Only list variants; skip segment size probes",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=_env_int("HLS_PROBE_SAMPLE_SIZE") or DEFAULT_SAMPLE_SIZE,
        help="Number of leading segments to probe per variant",
    )
    parser.add_argument("--timeout", type=int, default=_env_int("HLS_PROBE_TIMEOUT") or 10, help="Per-request timeout in seconds")
    parser.add_argument("--user-agent", default=_env_str("HLS_PROBE_USER_AGENT"), help="Override the User-Agent header")
    parser.add_argument(
        "--compress",
        action="store_true",
        default=_env_bool("HLS_PROBE_COMPRESS"),
        help="Show ffmpeg re-encode suggestions for each variant",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=_env_bool("HLS_PROBE_JSON"),
        help="Write the reports as JSON to stdout instead of a table",
    )
    parser.add_argument("--verbose", action="store_true", default=_env_bool("HLS_PROBE_VERBOSE"), help="Log every segment probe")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _describe_estimate(estimate: SizeEstimate | None) -> str:
    if estimate is None:
        return "not estimated"
    return f"{format_bytes(estimate.total_bytes)} ({estimate.sampled_segments}/{estimate.total_segments} segments sampled)"


def _print_compression(input_url: str, total_bytes: int | None) -> None:
    for profile in derive_compression_profiles(total_bytes):
        logging.info("      %-14s crf %-3s ~%s", profile.label, profile.crf, format_bytes(profile.estimated_bytes))
        logging.info("        %s", profile.render_command(input_url))


def print_report(report: StreamReport, show_compression: bool = False) -> None:
    logging.info("Source: %s", report.source_url)
    if report.failure is ParseFailureReason.UNREACHABLE:
        logging.error("  Playlist could not be fetched.")
        return

    if report.failure is ParseFailureReason.NOT_MULTIVARIANT:
        logging.info("  No variants found; treated as a single stream.")
        if report.single_stream is not None:
            logging.info("  Size: %s", _describe_estimate(report.single_stream))
            if show_compression:
                _print_compression(report.source_url, report.single_stream.total_bytes)
        return

    logging.info("  %-8s | %-10s | %-12s | %s", "Quality", "Resolution", "Bitrate", "Size")
    logging.info("  %s", "-" * 72)
    for variant_report in report.by_estimated_size():
        variant = variant_report.variant
        logging.info(
            "  %-8s | %-10s | %-12s | %s",
            variant.quality_label,
            str(variant.resolution) if variant.resolution else "Unknown",
            format_bandwidth(variant.bandwidth),
            _describe_estimate(variant_report.estimate),
        )
        logging.info("    %s", variant.media_playlist_url)
        logging.info("    %s", build_copy_command(variant))
        if show_compression:
            _print_compression(variant.media_playlist_url, variant_report.total_bytes)


def dump_reports(reports: list[StreamReport]) -> str:
    return json.dumps([report.model_dump(mode="json") for report in reports], indent=2)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.sample_size < 1:
        logging.error("--sample-size must be at least 1")
        return 2

    with HttpClient(timeout=args.timeout, user_agent=args.user_agent) as http_client:
        analyzer = StreamAnalyzer(http_client, estimator=SizeEstimator(http_client, sample_size=args.sample_size))
        estimate_sizes = not args.no_estimate
        if len(args.urls) == 1:
            reports = [analyzer.analyze(args.urls[0], estimate_sizes=estimate_sizes)]
        else:
            reports = asyncio.run(_analyze_all(analyzer, http_client, args.urls, estimate_sizes))

    if args.json:
        sys.stdout.write(dump_reports(reports) + "\n")
    else:
        for report in reports:
            print_report(report, show_compression=args.compress)

    if all(report.failure is ParseFailureReason.UNREACHABLE for report in reports):
        return 1
    return 0


async def _analyze_all(
    analyzer: StreamAnalyzer,
    http_client: HttpClient,
    urls: list[str],
    estimate_sizes: bool,
) -> list[StreamReport]:
    try:
        return await analyzer.analyze_many(urls, estimate_sizes=estimate_sizes)
    finally:
        await http_client.aclose()


if __name__ == "__main__":
    sys.exit(main())
