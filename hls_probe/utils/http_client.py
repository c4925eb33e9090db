"""Shared HTTP helpers for fetching playlists and probing segment sizes."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Mapping, Optional

import aiohttp
import requests
from requests.structures import CaseInsensitiveDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS: Dict[str, str] = {
    "user-agent": DEFAULT_USER_AGENT,
    "accept": "*/*",
}

Headers = Mapping[str, str]


class FetchError(Exception):
    """Raised when a request fails at the transport level or with an error status."""


def byte_range(first: int, last: int) -> str:
    return f"bytes={first}-{last}"


class HttpClient:
    """Issues GET, HEAD and ranged GET requests, synchronously or with asyncio."""

    def __init__(self, timeout: int = 10, user_agent: Optional[str] = None) -> None:
        self.timeout = timeout
        self._headers = DEFAULT_HEADERS.copy()
        if user_agent:
            self._headers["user-agent"] = user_agent

        self._session = requests.Session()
        self._session.headers.update(self._headers)

        self._async_session: Optional[aiohttp.ClientSession] = None
        self._async_lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def headers(self) -> Dict[str, str]:
        return self._headers.copy()

    def fetch_text(self, url: str) -> str:
        """Fetch a resource as text (e.g., m3u8)."""

        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as exc:
            logging.debug("GET %s failed: %s", url, exc)
            raise FetchError(f"GET {url} failed: {exc}") from exc

    def head(self, url: str) -> Headers:
        """Return the response headers of a HEAD request."""

        try:
            response = self._session.head(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
            return CaseInsensitiveDict(response.headers)
        except requests.RequestException as exc:
            logging.debug("HEAD %s failed: %s", url, exc)
            raise FetchError(f"HEAD {url} failed: {exc}") from exc

    def get_range(self, url: str, first: int = 0, last: int = 0) -> Headers:
        """Return the response headers of a ranged GET without reading the body."""

        try:
            with self._session.get(
                url,
                headers={"Range": byte_range(first, last)},
                timeout=self.timeout,
                stream=True,
            ) as response:
                response.raise_for_status()
                return CaseInsensitiveDict(response.headers)
        except requests.RequestException as exc:
            logging.debug("Ranged GET %s failed: %s", url, exc)
            raise FetchError(f"Ranged GET {url} failed: {exc}") from exc

    async def fetch_text_async(self, url: str) -> str:
        session = await self._get_async_session()
        try:
            async with session.get(url) as resp:
                resp.raise_for_status()
                return await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logging.debug("GET %s failed: %s", url, exc)
            raise FetchError(f"GET {url} failed: {exc}") from exc

    async def head_async(self, url: str) -> Headers:
        session = await self._get_async_session()
        try:
            async with session.head(url, allow_redirects=True) as resp:
                resp.raise_for_status()
                return CaseInsensitiveDict(resp.headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logging.debug("HEAD %s failed: %s", url, exc)
            raise FetchError(f"HEAD {url} failed: {exc}") from exc

    async def get_range_async(self, url: str, first: int = 0, last: int = 0) -> Headers:
        session = await self._get_async_session()
        try:
            async with session.get(url, headers={"Range": byte_range(first, last)}) as resp:
                resp.raise_for_status()
                return CaseInsensitiveDict(resp.headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logging.debug("Ranged GET %s failed: %s", url, exc)
            raise FetchError(f"Ranged GET {url} failed: {exc}") from exc

    async def _get_async_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._async_session:
            if (
                self._async_session.closed
                or not self._loop
                or self._loop.is_closed()
                or self._loop is not current_loop
            ):
                await self._shutdown_async_session()

        if self._async_lock is None:
            self._async_lock = asyncio.Lock()

        async with self._async_lock:
            if self._async_session and not self._async_session.closed:
                return self._async_session
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._async_session = aiohttp.ClientSession(
                timeout=timeout,
                headers=self._headers.copy(),
            )
            self._loop = current_loop
        return self._async_session

    async def _shutdown_async_session(self) -> None:
        if self._async_session:
            try:
                await self._async_session.close()
            except RuntimeError as exc:  # pragma: no cover - loop already gone
                logging.debug("Ignoring error while closing async session: %s", exc)
        self._async_session = None
        self._async_lock = None
        self._loop = None

    async def aclose(self) -> None:
        await self._shutdown_async_session()

    def close(self) -> None:
        self._session.close()

        if self._async_session and not self._async_session.closed:
            try:
                asyncio.run(self._async_session.close())
            except RuntimeError:
                loop = asyncio.get_running_loop()
                loop.create_task(self._async_session.close())
        self._async_session = None
        self._loop = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
        self._session.close()
