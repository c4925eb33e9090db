"""Data models for playlists, size estimates, and analysis reports."""

from .playlist_models import (
    CompressionProfile,
    CompressionTier,
    ParseFailure,
    ParseFailureReason,
    Resolution,
    SizeEstimate,
    Variant,
)
from .report_models import StreamReport, VariantReport

__all__ = [
    "Resolution",
    "Variant",
    "ParseFailure",
    "ParseFailureReason",
    "SizeEstimate",
    "CompressionTier",
    "CompressionProfile",
    "VariantReport",
    "StreamReport",
]
