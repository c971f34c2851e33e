"""
Base Resolver

Description: Base classes for host specific resolvers that turn a post link into direct download URLs
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.

Dual License:
1. Non-Commercial Use: This software is licensed under the terms of the
   Creative Commons Attribution-NonCommercial 4.0 International License.
   To view a copy of this license, visit http://creativecommons.org/licenses/by-nc/4.0/

2. Commercial Use: For commercial use, a separate license is required.
   Please contact Eric Hiss at eric@historic.camera or eric@rollei.us for licensing options.

Dependencies:
This code depends on several third-party libraries, each with its own license.
See CREDITS.md for a comprehensive list of dependencies and their licenses.
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult
from utils.persistent_settings import PersistentSettings, get_settings_manager

logger = logging.getLogger("post-downloader")

PATTERN_FLAGS = re.I | re.S

ResolvedResult = Union[str, AlbumResult, None]


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed attempt cap with a fixed delay between attempts."""

    attempts: int = 3
    delay: float = 1.0

    async def run(self, attempt: Callable[[], Awaitable[Any]], label: str = "") -> Any:
        """
        Call attempt until it returns something other than None.

        ResolutionError and ValueError (bad JSON included) count as a failed attempt.

        Returns:
            The first non-None result, or None once the attempts are used up
        """
        for number in range(1, max(1, self.attempts) + 1):
            try:
                result = await attempt()
                if result is not None:
                    return result
            except (ResolutionError, ValueError) as e:
                logger.debug("Attempt %d/%d failed for %s: %s", number, self.attempts, label, e)
            if number < self.attempts and self.delay > 0:
                await asyncio.sleep(self.delay)
        logger.warning("Giving up on %s after %d attempts", label, self.attempts)
        return None


@dataclass
class ResolverSettings:
    """Resolver tunables. Retry counts and delays are empirical, not correctness requirements."""

    gofile_token: str = ""
    gofile_website_token: str = "12345"
    pornhub_retry: RetryPolicy = field(default_factory=lambda: RetryPolicy(attempts=20, delay=1.0))
    instagram_page_delay: float = 3.0
    image_extensions: Tuple[str, ...] = ('jpg', 'jpeg', 'png', 'gif', 'gifv', 'webp', 'jpe', 'svg', 'tif', 'tiff', 'jif')

    @classmethod
    def from_settings(cls, settings: Optional[PersistentSettings] = None) -> "ResolverSettings":
        settings = settings or get_settings_manager()
        section = settings.get_all('resolvers')
        defaults = cls()
        return cls(
            gofile_token=section.get('gofile_token') or defaults.gofile_token,
            gofile_website_token=section.get('gofile_website_token') or defaults.gofile_website_token,
            pornhub_retry=RetryPolicy(
                attempts=int(section.get('pornhub_attempts', defaults.pornhub_retry.attempts)),
                delay=float(section.get('pornhub_delay', defaults.pornhub_retry.delay)),
            ),
            instagram_page_delay=float(section.get('instagram_page_delay', defaults.instagram_page_delay)),
            image_extensions=tuple(section.get('image_extensions') or defaults.image_extensions),
        )


@dataclass
class ResolverContext:
    """What a resolver may use: the fetch client, password candidates, settings and the run log."""

    http: Any
    passwords: Sequence[str] = ()
    settings: ResolverSettings = field(default_factory=ResolverSettings)
    log: Any = None

    def info(self, message: str, source: str = None):
        if self.log is not None:
            self.log.info(message, source)
        else:
            logger.info("%s %s", source or "", message)

    def error(self, message: str, source: str = None):
        if self.log is not None:
            self.log.error(message, source)
        else:
            logger.error("%s %s", source or "", message)


class BaseResolver:
    """
    Base class that all host resolvers inherit from.

    A resolver fires for a resource when `match` is found in it and none of the
    `exclude` patterns are. The registry is ordered and only the first firing
    resolver runs.
    """

    kind: str = None
    match: str = None
    exclude: Tuple[str, ...] = ()
    host: str = ""

    @classmethod
    def can_handle(cls, url: str) -> bool:
        """
        Determine if this resolver can process the given resource.

        Args:
            url (str): The matched resource

        Returns:
            bool: True if the must-match pattern fires and no must-not-match pattern does
        """
        if not cls.match or not url:
            return False
        if not re.search(cls.match, url, PATTERN_FLAGS):
            return False
        return not any(re.search(pattern, url, PATTERN_FLAGS) for pattern in cls.exclude)

    def __init__(self, url: str, context: ResolverContext):
        self.url = url
        self.context = context
        self.http = context.http
        self.settings = context.settings

    async def resolve(self) -> ResolvedResult:
        raise NotImplementedError

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.kind} {self.url}>"


class TransformResolver(BaseResolver):
    """
    Pure string rewrite, no network.

    transform() must be idempotent: applying it to its own output is a no-op.
    """

    kind = "transform"

    @classmethod
    def transform(cls, url: str) -> str:
        return url

    async def resolve(self) -> ResolvedResult:
        return self.transform(self.url)


class PipelineResolver(BaseResolver):
    """Resolver that performs network calls and may return an album."""

    kind = "pipeline"

    # --- HTML helpers ---
    @staticmethod
    def attr(document: BeautifulSoup, selector: str, attribute: str) -> Optional[str]:
        element = document.select_one(selector) if document is not None else None
        if element is None:
            return None
        value = element.get(attribute)
        return value.strip() if isinstance(value, str) else value

    @staticmethod
    def attrs(document: BeautifulSoup, selector: str, attribute: str) -> List[str]:
        if document is None:
            return []
        return [el.get(attribute).strip() for el in document.select(selector) if el.get(attribute)]

    @staticmethod
    def text(document: BeautifulSoup, selector: str) -> Optional[str]:
        element = document.select_one(selector) if document is not None else None
        return element.get_text().strip() if element is not None else None

    @classmethod
    def meta(cls, document: BeautifulSoup, prop: str) -> Optional[str]:
        return cls.attr(document, f'meta[property="{prop}"]', 'content')

    @staticmethod
    def scripts(document: BeautifulSoup, needle: str = None) -> List[str]:
        """Inline script bodies, optionally only those containing needle."""
        if document is None:
            return []
        bodies = [s.string or s.get_text() for s in document.find_all('script')]
        return [b for b in bodies if b and (needle is None or needle in b)]

    @staticmethod
    def load_json(text: Optional[str], label: str = "") -> Any:
        """Parse JSON from an upstream, raising ResolutionError instead of ValueError."""
        if not text:
            raise ResolutionError(f"Empty response from {label}")
        try:
            return json.loads(text)
        except ValueError as e:
            raise ResolutionError(f"Invalid JSON from {label}: {e}") from e

    async def crawl_pages(self, url: str,
                          extract: Callable[[BeautifulSoup], List[str]],
                          next_page: Callable[[BeautifulSoup], Optional[str]]):
        """
        Walk a paginated listing as a work queue.

        Stops when a page has no next link or the next link was already visited.

        Returns:
            (first page response, collected URLs)
        """
        first = await self.http.get(url)
        visited = {url, first.url}
        collected = []
        page = first
        while page is not None:
            collected.extend(extract(page.document))
            next_url = next_page(page.document)
            if not next_url or next_url in visited:
                break
            visited.add(next_url)
            page = await self.http.get(next_url)
        return first, collected

