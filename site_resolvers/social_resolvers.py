"""
Social Resolvers

Description: Resolvers for imgur, instagram and reddit links, including s9e iframe embeds
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import asyncio
import re

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult
from site_resolvers.base_resolver import PipelineResolver, TransformResolver
from utils.helpers import basename, find_all, find_first

INSTAGRAM_HEADERS = {'User-Agent': 'Instagram 219.0.0.12.117 Android'}
INSTAGRAM_FEED_API = 'https://www.instagram.com/api/v1/feed/user/'


class ImgurResolver(PipelineResolver):
    """
    Handler for imgur pages, albums and s9e iframe embeds.

    Direct i.imgur.com links are left to ImgurDirectResolver.
    """

    host = "imgur.com"
    match = r'imgur\.min\.|imgur\.(com|io)'
    exclude = (r'(?<![\w.])(?!www\.)\w+\.imgur\.(com|io)',)

    def parse_id(self, url):
        """Return (kind, id) where kind is 'album' or 'single'."""
        if 's9e.github.io' in url:
            ident = find_first(r'(?<=#).*', url) or ''
            if ident.startswith('a/'):
                return 'album', ident[2:]
            return 'single', ident
        kind = 'album' if re.search(r'/(a|gallery)/', url) else 'single'
        return kind, basename(url)

    async def resolve(self):
        url = self.url.replace('\\/', '/')
        kind, ident = self.parse_id(url)
        if not ident:
            raise ResolutionError(f"No imgur id in {self.url}")

        if kind == 'album':
            response = await self.http.get(f'https://api.imgur.com/3/album/{ident}.json')
            payload = self.load_json(response.body, 'imgur album')
            data = payload.get('data') if isinstance(payload, dict) else None
            images = data.get('images') if isinstance(data, dict) else None
            if not images or not isinstance(images, list):
                return None
            return AlbumResult(folder_name=data.get('title') or None,
                               resolved_urls=[image['link'] for image in images
                                              if isinstance(image, dict) and image.get('link')])

        page = await self.http.get(f'https://imgur.com/{ident}')
        if 'og:video' in page.body:
            return self.meta(page.document, 'og:video')
        return self.meta(page.document, 'og:image')


class ImgurDirectResolver(TransformResolver):
    host = "imgur.com"
    match = r'\w+\.imgur\.(com|io)'


class InstagramEmbedResolver(PipelineResolver):
    host = "instagram.com"
    match = r'instagram\.min'

    async def resolve(self):
        post_id = re.sub(r'#theme.*', '', self.url, flags=re.I | re.S).split('#')[-1]
        page = await self.http.get(f'https://www.instagram.com/p/{post_id}/embed')

        scripts = self.scripts(page.document, 'shortcode_media')
        resolved = []
        if scripts and '"is_video":true' in scripts[0]:
            resolved = [v.replace('\\u0026', '&') for v in find_all(r'(?<=video_url":").*?(?=")', scripts[0])]

        if not resolved:
            return None
        if len(resolved) > 1:
            return AlbumResult(folder_name=None, resolved_urls=resolved)
        return resolved[0]


class InstagramProfileResolver(PipelineResolver):
    """
    Handler for instagram profiles ('instagram.com/<user>' or 'insta: @user' in post text).

    The user feed API is paged with max_id; pages are requested with a delay
    between them to stay under the rate limit.
    """

    host = "instagram.com"
    match = r'instagram\.com/[a-zA-Z0-9_.-]+|((instagram|insta):(\s+)?)@?[a-zA-Z0-9_.-]+'

    def username(self):
        if re.search(r'(instagram|insta):', self.url, re.I):
            return re.sub(r'(instagram:|insta:)', '', self.url, flags=re.I).replace('@', '').strip()
        return self.url.rstrip('/').split('/')[-1]

    @staticmethod
    def _first_url(versions):
        if isinstance(versions, list) and versions and isinstance(versions[0], dict):
            return versions[0].get('url')
        return None

    @classmethod
    def _image_url(cls, media):
        images = media.get('image_versions2') if isinstance(media, dict) else None
        return cls._first_url(images.get('candidates')) if isinstance(images, dict) else None

    @classmethod
    def collect_items(cls, props):
        """Media URLs of one feed page. Items without a usable URL are skipped."""
        urls = []
        for item in props.get('items') or []:
            if not isinstance(item, dict):
                continue
            product = item.get('product_type')
            if product == 'feed':
                urls.append(cls._image_url(item))
            elif product == 'carousel_container':
                urls.extend(cls._image_url(media) for media in item.get('carousel_media') or [])
            elif product == 'clips':
                urls.append(cls._first_url(item.get('video_versions')))
        return [url for url in urls if isinstance(url, str) and url]

    async def resolve(self):
        username = self.username()
        profile = await self.http.get(f'https://instagram.com/{username}', headers=INSTAGRAM_HEADERS)
        profile_id = find_first(r'(?<="profile_id":")\d+', profile.body)
        if not profile_id:
            raise ResolutionError(f"No profile id for {username}")

        feed_url = f'{INSTAGRAM_FEED_API}{profile_id}/?count=100'
        first_props = None
        resolved = []
        seen_cursors = set()
        while feed_url:
            response = await self.http.get(feed_url, headers=INSTAGRAM_HEADERS)
            props = self.load_json(response.body, 'instagram feed')
            if not isinstance(props, dict):
                break
            if first_props is None:
                first_props = props
            if props.get('status') != 'ok' or not props.get('num_results'):
                break
            resolved.extend(self.collect_items(props))

            cursor = props.get('next_max_id')
            feed_url = None
            if props.get('more_available') is True and cursor and cursor not in seen_cursors:
                seen_cursors.add(cursor)
                await asyncio.sleep(self.settings.instagram_page_delay)
                feed_url = f'{INSTAGRAM_FEED_API}{profile_id}/?count=100&max_id={cursor}'

        resolved = [u.replace('\\u0026', '&') for u in resolved]
        if not resolved:
            return None
        if len(resolved) == 1:
            return resolved[0]
        full_name = ((first_props or {}).get('user') or {}).get('full_name')
        return AlbumResult(folder_name=full_name or username, resolved_urls=resolved)


class RedditResolver(TransformResolver):
    host = "reddit.com"
    match = r'(\w+)?\.redd\.it'
