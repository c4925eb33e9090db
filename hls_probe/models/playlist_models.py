"""Pydantic models describing HLS variants, size estimates, and compression profiles."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

INPUT_URL_PLACEHOLDER = "{input_url}"


class Resolution(BaseModel):
    """Pixel dimensions advertised by ``RESOLUTION=WxH``."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class Variant(BaseModel):
    """One quality option of a multivariant playlist."""

    stream_info_line: str
    media_playlist_url: str
    bandwidth: Optional[int] = None
    resolution: Optional[Resolution] = None

    @property
    def quality_label(self) -> str:
        if self.resolution is None:
            return "Unknown"
        return f"{self.resolution.height}p"

    @property
    def sort_key(self) -> int:
        # unknown bandwidth sorts first
        return self.bandwidth or 0


class ParseFailureReason(str, Enum):
    UNREACHABLE = "unreachable"
    NOT_MULTIVARIANT = "not_multivariant"


class ParseFailure(BaseModel):
    """Returned instead of variants when a playlist could not be split."""

    reason: ParseFailureReason


class SizeEstimate(BaseModel):
    """Extrapolated size of a media playlist, plus the counts used to get there."""

    total_bytes: Optional[int] = None
    sampled_segments: int = 0
    total_segments: int = 0

    @property
    def is_known(self) -> bool:
        return self.total_bytes is not None


class CompressionTier(BaseModel):
    """A row of the re-encode heuristics table."""

    label: str
    target_resolution: str
    scale: str
    crf: str
    multiplier: float


class CompressionProfile(BaseModel):
    """A suggested re-encode with its rough output size."""

    label: str
    target_resolution: str
    crf: str
    estimated_bytes: Optional[int] = None
    command_template: str

    def render_command(self, input_url: str) -> str:
        return self.command_template.replace(INPUT_URL_PLACEHOLDER, input_url)
