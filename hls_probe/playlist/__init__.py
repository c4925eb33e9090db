"""Playlist parsing, size estimation, and ffmpeg command helpers."""

from .compression import COMPRESSION_TIERS, build_copy_command, derive_compression_profiles
from .multivariant_parser import PlaylistParser, ScanState, VariantScanner
from .size_estimator import SizeEstimator
from .stream_analyzer import StreamAnalyzer

__all__ = [
    "PlaylistParser",
    "VariantScanner",
    "ScanState",
    "SizeEstimator",
    "StreamAnalyzer",
    "COMPRESSION_TIERS",
    "derive_compression_profiles",
    "build_copy_command",
]
