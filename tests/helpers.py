from unittest.mock import MagicMock

from hls_probe.utils.http_client import FetchError, HttpClient

MASTER_URL = "https://cdn.example.com/vod/master.m3u8"

MASTER_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-STREAM-INF:BANDWIDTH=3000000,RESOLUTION=1920x1080,CODECS="avc1.640028,mp4a.40.2"
seg_high.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=800000,RESOLUTION=640x360
seg_low.m3u8
"""


def media_playlist(segment_count, prefix="segment"):
    lines = ["#EXTM3U", "#EXT-X-TARGETDURATION:10", "#EXT-X-MEDIA-SEQUENCE:0"]
    for index in range(segment_count):
        lines.append("#EXTINF:10.0,")
        lines.append(f"{prefix}{index}.ts")
    lines.append("#EXT-X-ENDLIST")
    return "\n".join(lines) + "\n"


def build_fake_client(texts=None, head_headers=None, range_headers=None):
    """Returns a mocked HttpClient answering from dictionaries keyed by URL.

    URLs missing from a dictionary raise ``FetchError``, like an unreachable origin.
    """

    texts = texts or {}
    head_headers = head_headers or {}
    range_headers = range_headers or {}

    def lookup(table, url):
        if url not in table:
            raise FetchError(f"no route to {url}")
        return table[url]

    client = MagicMock(spec=HttpClient)
    client.fetch_text.side_effect = lambda url: lookup(texts, url)
    client.head.side_effect = lambda url: lookup(head_headers, url)
    client.get_range.side_effect = lambda url, first=0, last=0: lookup(range_headers, url)

    async def fetch_text_async(url):
        return lookup(texts, url)

    async def head_async(url):
        return lookup(head_headers, url)

    async def get_range_async(url, first=0, last=0):
        return lookup(range_headers, url)

    client.fetch_text_async.side_effect = fetch_text_async
    client.head_async.side_effect = head_async
    client.get_range_async.side_effect = get_range_async
    return client
