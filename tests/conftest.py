# -*- coding: utf-8 -*-
"""
Shared fixtures: a canned fetch client so no test touches the network
"""

import asyncio

import pytest

from post_downloader.exceptions import TransferError
from post_downloader.run_context import run_registry
from site_resolvers import ResolverContext, ResolverSettings, RetryPolicy
from utils.http_client import BlobResponse, FetchResponse
from utils.persistent_settings import PersistentSettings


class FakeFetchClient:
    """
    Serves canned responses by exact URL.

    pages: url -> body, or a list of bodies served in turn (the last one repeats)
    blobs: url -> bytes, or (bytes, headers)
    failures: urls whose download raises TransferError
    """

    def __init__(self, pages=None, blobs=None, failures=(), posts=None):
        self.pages = dict(pages or {})
        self.posts = dict(posts or {})
        self.blobs = dict(blobs or {})
        self.failures = set(failures)
        self.requests = []

    @staticmethod
    def _next_body(table, url):
        body = table.get(url)
        if isinstance(body, list):
            return body.pop(0) if len(body) > 1 else body[0]
        return body

    async def get(self, url, headers=None):
        self.requests.append(('GET', url, headers))
        body = self._next_body(self.pages, url)
        if body is None:
            return FetchResponse(url=url, status=404, body='')
        return FetchResponse(url=url, status=200, body=body)

    async def post(self, url, data, headers=None):
        self.requests.append(('POST', url, data))
        body = self._next_body(self.posts, url)
        if body is None:
            return FetchResponse(url=url, status=404, body='')
        return FetchResponse(url=url, status=200, body=body)

    async def download(self, url, on_progress=None, headers=None):
        self.requests.append(('DOWNLOAD', url, headers))
        await asyncio.sleep(0)
        if url in self.failures or url not in self.blobs:
            raise TransferError(f"HTTP 404 for {url}")

        blob = self.blobs[url]
        data, blob_headers = blob if isinstance(blob, tuple) else (blob, {})
        if on_progress:
            on_progress(len(data), len(data))
        return BlobResponse(url=url, status=200, data=data, headers=blob_headers)

    def urls(self, method='GET'):
        return [r[1] for r in self.requests if r[0] == method]


@pytest.fixture
def fake_http():
    return FakeFetchClient()


@pytest.fixture
def resolver_settings():
    """Resolver settings with a preset gofile token and no retry delays."""
    return ResolverSettings(gofile_token='token123', pornhub_retry=RetryPolicy(attempts=3, delay=0),
                            instagram_page_delay=0)


@pytest.fixture
def make_context(resolver_settings):
    def factory(http, passwords=()):
        return ResolverContext(http=http, passwords=tuple(passwords), settings=resolver_settings)
    return factory


@pytest.fixture
def settings(tmp_path):
    return PersistentSettings(tmp_path / 'settings.json')


@pytest.fixture(autouse=True)
def clean_run_registry():
    run_registry.runs.clear()
    run_registry.interrupted.clear()
    yield
    run_registry.runs.clear()
    run_registry.interrupted.clear()
