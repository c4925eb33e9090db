"""Parse HLS multivariant playlists and estimate variant download sizes."""

from .models import (
    CompressionProfile,
    ParseFailure,
    ParseFailureReason,
    Resolution,
    SizeEstimate,
    StreamReport,
    Variant,
    VariantReport,
)
from .playlist import PlaylistParser, SizeEstimator, StreamAnalyzer, derive_compression_profiles
from .utils import HttpClient, format_bandwidth, format_bytes

__version__ = "0.1.0"

__all__ = [
    "PlaylistParser",
    "SizeEstimator",
    "StreamAnalyzer",
    "HttpClient",
    "Variant",
    "Resolution",
    "ParseFailure",
    "ParseFailureReason",
    "SizeEstimate",
    "CompressionProfile",
    "VariantReport",
    "StreamReport",
    "derive_compression_profiles",
    "format_bytes",
    "format_bandwidth",
]
