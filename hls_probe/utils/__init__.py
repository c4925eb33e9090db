"""Utility helpers for HTTP access and display formatting."""

from .formatting import format_bandwidth, format_bytes, round_half_up
from .http_client import FetchError, HttpClient

__all__ = ["HttpClient", "FetchError", "format_bytes", "format_bandwidth", "round_half_up"]
