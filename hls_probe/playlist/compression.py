"""ffmpeg command suggestions and rough re-encode size heuristics.

The multipliers below are empirical guesses, not measurements. They scale the
estimated source size to give a ballpark for each re-encode target and should
never be presented as exact.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import CompressionProfile, CompressionTier, Variant
from ..models.playlist_models import INPUT_URL_PLACEHOLDER
from ..utils.formatting import round_half_up

COMPRESSION_TIERS: Sequence[CompressionTier] = (
    CompressionTier(label="Tiny (360p)", target_resolution="360p", scale="640:360", crf="28", multiplier=0.15),
    CompressionTier(label="Low (480p)", target_resolution="480p", scale="854:480", crf="26", multiplier=0.25),
    CompressionTier(label="Medium (720p)", target_resolution="720p", scale="1280:720", crf="24", multiplier=0.40),
    CompressionTier(label="Good (1080p)", target_resolution="1080p", scale="1920:1080", crf="22", multiplier=0.60),
)


def compression_command_template(tier: CompressionTier) -> str:
    output_name = tier.label.split(" ")[0].lower()
    return (
        f'ffmpeg -i "{INPUT_URL_PLACEHOLDER}" -vf scale={tier.scale} -c:v libx264 '
        f"-crf {tier.crf} -preset medium -c:a aac -b:a 128k output_{output_name}.mp4"
    )


def derive_compression_profiles(
    total_bytes: Optional[int],
    tiers: Sequence[CompressionTier] = COMPRESSION_TIERS,
) -> List[CompressionProfile]:
    profiles = []
    for tier in tiers:
        estimated = round_half_up(total_bytes * tier.multiplier) if total_bytes is not None else None
        profiles.append(
            CompressionProfile(
                label=tier.label,
                target_resolution=tier.target_resolution,
                crf=tier.crf,
                estimated_bytes=estimated,
                command_template=compression_command_template(tier),
            )
        )
    return profiles


def build_copy_command(variant: Variant) -> str:
    """Stream-copy command that remuxes a variant into MP4 without re-encoding."""

    quality = str(variant.resolution) if variant.resolution else "Unknown"
    return f'ffmpeg -i "{variant.media_playlist_url}" -c copy output_{quality.replace("x", "_")}.mp4'
