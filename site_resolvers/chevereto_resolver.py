"""
Chevereto Resolvers

Description: Resolvers for Chevereto powered image hosts (jpg.church, ibb.co, pixl.is, img.kiwi)
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

"""
Chevereto serves thumbnails as name.th.ext and medium previews as name.md.ext
next to the original, so image links are rewritten and albums are read from
their listing pages.
"""

import re

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult
from site_resolvers.base_resolver import PipelineResolver, TransformResolver
from utils.helpers import strip_thumbnail_suffix


def _full_size(urls):
    return [strip_thumbnail_suffix(u) for u in urls if u]


class JpgChurchImageResolver(TransformResolver):
    host = "jpg.church"
    match = r'jpg\.church/'
    exclude = (r'jpg\.church/a/',)

    @classmethod
    def transform(cls, url):
        return strip_thumbnail_suffix(url)


class JpgChurchAlbumResolver(PipelineResolver):
    host = "jpg.church"
    match = r'jpg\.church/a/'

    async def resolve(self):
        url = re.sub(r'\?.*', '', self.url, flags=re.S)

        def extract(document):
            return _full_size(self.attrs(document, '.list-item-image > a > img', 'src'))

        def next_page(document):
            return self.attr(document, 'a[data-pagination="next"]', 'href')

        first, images = await self.crawl_pages(url, extract, next_page)
        title = self.meta(first.document, 'og:title')
        return AlbumResult(folder_name=title.strip() if title else None, resolved_urls=images)


class IbbImageResolver(PipelineResolver):
    host = "ibb.co"
    match = r'([a-z](\d+)?\.)?ibb\.co/[a-zA-Z0-9_.-]+'
    exclude = (r'([a-z](\d+)?\.)?ibb\.co/[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+',)

    async def resolve(self):
        page = await self.http.get(self.url)
        return self.attr(page.document, '.image-viewer-container > img', 'src')


class IbbAlbumResolver(PipelineResolver):
    host = "ibb.co"
    match = r'([a-z](\d+)?\.)?ibb\.co/album/[a-zA-Z0-9_.-]+'

    async def resolve(self):
        page = await self.http.get(self.url)
        title = self.meta(page.document, 'og:title')
        return AlbumResult(
            folder_name=title.strip() if title else None,
            resolved_urls=_full_size(self.attrs(page.document, '.image-container > img', 'src')),
        )


class PixlImageResolver(TransformResolver):
    host = "pixl.is"
    match = r'([a-z](\d+)\.)pixl\.(is|to)/((img|image)/)?'
    exclude = (r'pixl\.(is|to)/album/',)

    @classmethod
    def transform(cls, url):
        return strip_thumbnail_suffix(url)


class PixlAlbumResolver(PipelineResolver):
    host = "pixl.is"
    match = r'pixl\.(is|to)/album/'

    async def resolve(self):
        def extract(document):
            return _full_size(self.attrs(document, '.image-container > img', 'src'))

        def next_page(document):
            return self.attr(document, '.pagination-next > a', 'href')

        first, images = await self.crawl_pages(self.url, extract, next_page)
        title = self.meta(first.document, 'og:title')
        return AlbumResult(folder_name=title.strip() if title else None, resolved_urls=images)


class ImgKiwiImageResolver(PipelineResolver):
    host = "img.kiwi"
    match = r'img\.kiwi/image/'
    exclude = (r'img\.kiwi/album/',)

    async def resolve(self):
        page = await self.http.get(self.url)
        return self.meta(page.document, 'og:image')


class ImgKiwiAlbumResolver(PipelineResolver):
    host = "img.kiwi"
    match = r'img\.kiwi/album/'

    async def resolve(self):
        page = await self.http.get(self.url)
        title = self.meta(page.document, 'og:title')
        if title is None:
            raise ResolutionError(f"No album title on {self.url}")
        return AlbumResult(
            folder_name=title.strip(),
            resolved_urls=_full_size(self.attrs(page.document, '.image-container > img', 'src')),
        )
