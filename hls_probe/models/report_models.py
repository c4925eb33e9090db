"""Aggregated results handed to presentation layers."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .playlist_models import ParseFailureReason, SizeEstimate, Variant


class VariantReport(BaseModel):
    """A variant together with its (optional) size estimate."""

    variant: Variant
    estimate: Optional[SizeEstimate] = None

    @property
    def total_bytes(self) -> Optional[int]:
        if self.estimate is None:
            return None
        return self.estimate.total_bytes


class StreamReport(BaseModel):
    """Everything learned about one root playlist URL."""

    source_url: str
    variants: List[VariantReport] = []
    failure: Optional[ParseFailureReason] = None
    single_stream: Optional[SizeEstimate] = None

    @property
    def is_multivariant(self) -> bool:
        return bool(self.variants)

    def by_estimated_size(self) -> List[VariantReport]:
        """Variant reports ordered smallest to largest; unknown sizes count as 0."""

        return sorted(self.variants, key=lambda report: report.total_bytes or 0)
