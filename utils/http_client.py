"""
HTTP Client

Description: aiohttp based fetch client used by resolvers and the download orchestrator
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.

Dependencies:
This code depends on several third-party libraries, each with its own license.
See CREDITS.md for a comprehensive list of dependencies and their licenses.

Third-party code:
- Uses aiohttp (Apache 2.0): https://github.com/aio-libs/aiohttp
- Uses Beautiful Soup (MIT): https://www.crummy.com/software/BeautifulSoup/
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional

import aiohttp
from bs4 import BeautifulSoup

from post_downloader.exceptions import TransferError

logger = logging.getLogger("post-downloader")

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int, Optional[int]], None]


@dataclass
class FetchResponse:
    """Text response of a page or API call. The HTML tree is parsed on first access."""

    url: str
    status: int
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)
    _document: Optional[BeautifulSoup] = field(default=None, init=False, repr=False)

    @property
    def document(self) -> BeautifulSoup:
        if self._document is None:
            self._document = BeautifulSoup(self.body or "", "html.parser")
        return self._document

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400


@dataclass(frozen=True)
class BlobResponse:
    """Binary response of a final download."""

    url: str
    status: int
    data: bytes
    headers: Mapping[str, str]

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class HttpClient:
    """
    Fetch collaborator shared by a run.

    Use as an async context manager so the underlying aiohttp session is closed:

        async with HttpClient() as http:
            page = await http.get(url)
    """

    def __init__(self, timeout: float = 60, user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[aiohttp.ClientSession] = None):
        self.timeout = timeout
        self.user_agent = user_agent
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None, sock_read=self.timeout),
                headers={'User-Agent': self.user_agent},
            )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("HttpClient used outside of 'async with'")
        return self._session

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResponse:
        """GET a page or API endpoint and return its decoded body."""
        logger.debug("GET %s", url)
        async with self.session.get(url, headers=headers) as response:
            body = await response.text(errors='replace')
            return FetchResponse(url=str(response.url), status=response.status,
                                 body=body, headers=dict(response.headers))

    async def post(self, url: str, data, headers: Optional[Dict[str, str]] = None) -> FetchResponse:
        """POST a form or raw body and return the decoded response."""
        logger.debug("POST %s", url)
        async with self.session.post(url, data=data, headers=headers) as response:
            body = await response.text(errors='replace')
            return FetchResponse(url=str(response.url), status=response.status,
                                 body=body, headers=dict(response.headers))

    async def download(self, url: str, on_progress: Optional[ProgressCallback] = None,
                       headers: Optional[Dict[str, str]] = None) -> BlobResponse:
        """
        Stream a final file into memory.

        Args:
            url: Direct download URL
            on_progress: Called with (bytes loaded, total bytes or None) after each chunk
            headers: Extra request headers

        Raises:
            TransferError: On HTTP error status or network failure
        """
        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status >= 400:
                    raise TransferError(f"HTTP {response.status} for {url}")
                total = response.content_length
                loaded = 0
                chunks = []
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    chunks.append(chunk)
                    loaded += len(chunk)
                    if on_progress:
                        on_progress(loaded, total)
                return BlobResponse(url=str(response.url), status=response.status,
                                    data=b''.join(chunks), headers=dict(response.headers))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransferError(f"{type(e).__name__} while downloading {url}: {e}") from e
