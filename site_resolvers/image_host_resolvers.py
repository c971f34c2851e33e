"""
Image Host Resolvers

Description: Resolvers for pixhost.to, imgbox.com, imagebam.com and twimg.com links
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import re
from datetime import datetime, timedelta, timezone

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult
from site_resolvers.base_resolver import PipelineResolver, TransformResolver
from utils.helpers import find_all


class PixhostImageResolver(TransformResolver):
    """t12.pixhost.to/thumbs/... -> img12.pixhost.to/images/..."""

    host = "pixhost.to"
    match = r't(\d+)?\.pixhost\.to/'
    exclude = (r'pixhost\.to/gallery/',)

    @classmethod
    def transform(cls, url):
        url = re.sub(r'(?<![\w-])t(\d+)\.', r'img\1.', url, flags=re.I)
        return re.sub(r'thumbs/', 'images/', url, count=1, flags=re.I)


class PixhostGalleryResolver(PipelineResolver):
    host = "pixhost.to"
    match = r'pixhost\.to/gallery/'

    async def resolve(self):
        page = await self.http.get(self.url)
        document = page.document

        links = self.attr(document, '.share > div:nth-child(2) > input', 'value')
        if links is None:
            links = self.attr(document, '.share > input:nth-child(2)', 'value')
        if links is None:
            raise ResolutionError(f"No share links on {self.url}")

        thumbs = find_all(r'(?<=\[img\])https://t\d+.*?(?=\[/img\])', links)
        return AlbumResult(
            folder_name=self.text(document, '.link > h2'),
            resolved_urls=[PixhostImageResolver.transform(u) for u in thumbs],
        )


class ImgboxImageResolver(TransformResolver):
    """thumbs2.imgbox.com/ab/cd/x_t.png -> images2.imgbox.com/ab/cd/x_o.png"""

    host = "imgbox.com"
    match = r'(thumbs|images)(\d+)?\.imgbox\.com/'
    exclude = (r'imgbox\.com/g/',)

    @classmethod
    def transform(cls, url):
        url = re.sub(r'_t\.', '_o.', url, flags=re.I)
        return re.sub(r'thumbs', 'images', url, count=1, flags=re.I)


class ImgboxGalleryResolver(PipelineResolver):
    host = "imgbox.com"
    match = r'imgbox\.com/g/'

    async def resolve(self):
        page = await self.http.get(self.url)
        thumbs = self.attrs(page.document, '#gallery-view-content > a > img', 'src')
        resolved = [
            re.sub(r'(thumbs|t)(\d+)\.', r'images\2.', u, flags=re.I | re.S).replace('_b.', '_o.')
            for u in thumbs
        ]
        return AlbumResult(folder_name=self.text(page.document, '#gallery-view > h1'), resolved_urls=resolved)


class ImagebamResolver(PipelineResolver):
    """Single view pages and galleries. The nsfw interstitial is skipped with a cookie."""

    host = "imagebam.com"
    match = r'imagebam\.com/(view|gallery)'

    def _cookie_headers(self):
        expires = (datetime.now(timezone.utc) + timedelta(hours=6)).strftime('%a, %d %b %Y %H:%M:%S GMT')
        return {'cookie': f'nsfw_inter=1; expires={expires}; path=/'}

    async def resolve(self):
        headers = self._cookie_headers()
        page = await self.http.get(self.url, headers=headers)

        if 'gallery-name' not in page.body:
            return self.attr(page.document, '.main-image', 'src')

        links = self.attr(page.document, '.links.gallery > div:nth-child(2) > div > input', 'value')
        resolved = []
        for link in find_all(r'(?<=\[URL=).*?(?=\])', links):
            view = await self.http.get(link, headers=headers)
            image = self.attr(view.document, '.main-image', 'src')
            if image:
                resolved.append(image)
        return AlbumResult(folder_name=self.text(page.document, '#gallery-name'), resolved_urls=resolved)


class TwimgResolver(TransformResolver):
    host = "twitter.com"
    match = r'twimg\.com/'

    @classmethod
    def transform(cls, url):
        return url.replace(':large', '').replace('&amp;', '&')
