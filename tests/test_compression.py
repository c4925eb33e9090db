from hls_probe.models import CompressionTier, Resolution, Variant
from hls_probe.playlist.compression import (
    COMPRESSION_TIERS,
    build_copy_command,
    derive_compression_profiles,
)


def test_profiles_follow_tier_order():
    profiles = derive_compression_profiles(1_000_000)
    assert [p.target_resolution for p in profiles] == ["360p", "480p", "720p", "1080p"]
    assert [p.crf for p in profiles] == ["28", "26", "24", "22"]
    assert [p.estimated_bytes for p in profiles] == [150_000, 250_000, 400_000, 600_000]


def test_profiles_without_known_size():
    profiles = derive_compression_profiles(None)
    assert len(profiles) == 4
    assert all(p.estimated_bytes is None for p in profiles)


def test_profile_command_renders_input_url():
    tiny = derive_compression_profiles(None)[0]
    assert tiny.render_command("https://cdn.example.com/v/low.m3u8") == (
        'ffmpeg -i "https://cdn.example.com/v/low.m3u8" -vf scale=640:360 -c:v libx264 '
        "-crf 28 -preset medium -c:a aac -b:a 128k output_tiny.mp4"
    )


def test_custom_tier_table():
    tiers = [CompressionTier(label="Phone (240p)", target_resolution="240p", scale="426:240", crf="30", multiplier=0.1)]
    profiles = derive_compression_profiles(5000, tiers=tiers)
    assert len(profiles) == 1
    assert profiles[0].estimated_bytes == 500
    assert "output_phone.mp4" in profiles[0].command_template


def test_default_table_is_untouched_by_derivation():
    derive_compression_profiles(123)
    assert [tier.multiplier for tier in COMPRESSION_TIERS] == [0.15, 0.25, 0.40, 0.60]


def test_build_copy_command():
    variant = Variant(
        stream_info_line="#EXT-X-STREAM-INF:BANDWIDTH=1",
        media_playlist_url="https://cdn.example.com/v/high.m3u8",
        resolution=Resolution(width=1920, height=1080),
    )
    assert build_copy_command(variant) == 'ffmpeg -i "https://cdn.example.com/v/high.m3u8" -c copy output_1920_1080.mp4'


def test_build_copy_command_without_resolution():
    variant = Variant(stream_info_line="#EXT-X-STREAM-INF:BANDWIDTH=1", media_playlist_url="https://x.example/a.m3u8")
    assert build_copy_command(variant).endswith("output_Unknown.mp4")
