"""
File Host Resolvers

Description: Resolvers for generic file and folder hosts (bunkr, pixeldrain, anonfiles, erome, box, yandex, cyberdrop, cyberfile)
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import json
import re

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult
from site_resolvers.base_resolver import PipelineResolver, TransformResolver
from utils.helpers import basename, find_first

FORM_HEADERS = {'Content-Type': 'application/x-www-form-urlencoded'}


def _next_data(document):
    """Parse the Next.js __NEXT_DATA__ payload embedded in a page ({} when absent)."""
    script = document.select_one('#__NEXT_DATA__') if document is not None else None
    if script is None:
        return {}
    try:
        data = json.loads(script.string or script.get_text() or '{}')
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _page_file(props):
    page_props = props.get('pageProps') if isinstance(props, dict) else None
    file = page_props.get('file') if isinstance(page_props, dict) else None
    if isinstance(file, dict) and file.get('name'):
        return f"{file.get('mediafiles')}/{file['name']}"
    return None


class BunkrFileResolver(PipelineResolver):
    host = "bunkr.is"
    match = r'(stream|cdn(\d+)?|i(\d+)?)\.bunkr\.is/(v/)?'
    exclude = (r'bunkr\.is/a/',)

    async def resolve(self):
        url = self.url
        if re.search(r'(\.zip|\.pdf)', url, re.I):
            url = re.sub(r'cdn\d+', 'files', url, count=1)

        # Images are served straight from the i* servers
        lowered = url.lower()
        for ext in self.settings.image_extensions:
            if lowered.endswith(f'.{ext}'):
                return re.sub(r'cdn(\d+)?', r'i\1', url, count=1)

        page = await self.http.get(url)
        next_data = _next_data(page.document)

        direct = _page_file(next_data.get('props'))
        if direct:
            return direct

        build_id = next_data.get('buildId')
        if not build_id:
            return None

        filename = basename(url).replace('&amp;', '&')
        api = await self.http.get(f'https://stream.bunkr.is/_next/data/{build_id}/v/{filename}.json')
        try:
            return _page_file(json.loads(api.body))
        except ValueError:
            return None


class BunkrAlbumResolver(PipelineResolver):
    host = "bunkr.is"
    match = r'bunkr\.is/a/'

    async def resolve(self):
        page = await self.http.get(self.url)
        props = _next_data(page.document).get('props')
        page_props = props.get('pageProps') if isinstance(props, dict) else None
        album = page_props.get('album') if isinstance(page_props, dict) else None
        files = album.get('files') if isinstance(album, dict) else None

        resolved = [
            f"{file['cdn'].replace('cdn', 'media-files', 1)}/{file['name']}"
            for file in files or []
            if isinstance(file, dict) and isinstance(file.get('cdn'), str) and file.get('name')
        ]
        return AlbumResult(folder_name=self.text(page.document, '#title') or basename(self.url),
                           resolved_urls=resolved)


class PixeldrainResolver(TransformResolver):
    """/u/<id> -> /api/file/<id>?download, /l/<id> -> /api/list/<id>/zip"""

    host = "pixeldrain.com"
    match = r'pixeldrain\.com/[ul]'

    @classmethod
    def transform(cls, url):
        resolved = url.replace('/u/', '/api/file/').replace('/l/', '/api/list/')
        if '/api/list/' in resolved and not resolved.endswith('/zip'):
            resolved = f'{resolved}/zip'
        if '/api/file/' in resolved and not resolved.endswith('?download'):
            resolved = f'{resolved}?download'
        return resolved


class AnonfilesResolver(PipelineResolver):
    host = "anonfiles.com"
    match = r'anonfiles\.com/'

    async def resolve(self):
        page = await self.http.get(self.url)
        return self.attr(page.document, '#download-url', 'href')


class EromeAlbumResolver(PipelineResolver):
    host = "erome.com"
    match = r'erome\.com/a/'

    async def resolve(self):
        page = await self.http.get(self.url)
        resolved = []
        for group in page.document.select('.media-group'):
            image = group.select_one('.img-front')
            video = group.select_one('source')
            source = (image.get('data-src') if image is not None else None) or \
                     (video.get('src') if video is not None else None)
            if source:
                resolved.append(source)
        return AlbumResult(folder_name=self.text(page.document, '.col-sm-12.page-content > h1'),
                           resolved_urls=resolved)


class BoxFolderResolver(PipelineResolver):
    host = "box.com"
    match = r'm\.box\.com/'

    async def resolve(self):
        page = await self.http.get(self.url)
        files = [f'https://m.box.com{href}' for href in self.attrs(page.document, '.files-item-anchor', 'href')]

        resolved = []
        for file_url in files:
            file_page = await self.http.get(file_url)
            if 'image-preview' in file_page.body:
                link = self.attr(file_page.document, '.image-preview', 'src')
            else:
                link = self.attr(file_page.document, '.mtl > a', 'href')
            if link:
                resolved.append(f'https://m.box.com{link}')

        return AlbumResult(folder_name=self.text(page.document, '.folder-nav-title'), resolved_urls=resolved)


class YandexDiskResolver(PipelineResolver):
    host = "yandex.ru"
    match = r'(disk\.)?yandex\.[a-z]+'

    async def resolve(self):
        page = await self.http.get(self.url)
        script = page.document.select_one('script[id="store-prefetch"]')
        if script is None:
            return None

        store = self.load_json(script.string or script.get_text(), 'yandex store')
        if not isinstance(store, dict):
            raise ResolutionError(f"Unexpected yandex store on {self.url}")
        environment, resources = store.get('environment'), store.get('resources')
        if not isinstance(environment, dict) or not isinstance(resources, dict) or not resources:
            return None

        first = next(iter(resources.values()))
        if not isinstance(first, dict) or not first.get('hash'):
            return None
        payload = json.dumps({'hash': first.get('hash'), 'sk': environment.get('sk')})
        response = await self.http.post('https://disk.yandex.ru/public/api/download-url', payload,
                                        headers={'Content-Type': 'text/plain'})
        data = self.load_json(response.body, 'yandex download-url')
        if not isinstance(data, dict):
            raise ResolutionError(f"Unexpected yandex download-url payload for {self.url}")
        if data.get('error') not in (True, 'true') and isinstance(data.get('data'), dict):
            return data['data'].get('url')
        return None


class CyberdropFileResolver(TransformResolver):
    """Every fs-N/img-N file server answers for every file; fs-01 is the stable one."""

    host = "cyberdrop.me"
    match = r'fs-\d+\.cyberdrop\.(me|to|cc|nl)/'
    exclude = (r'cyberdrop\.(me|to|cc|nl)/a/',)

    @classmethod
    def transform(cls, url):
        return re.sub(r'(fs|img)-\d+', 'fs-01', url, count=1, flags=re.I)


class CyberdropAlbumResolver(PipelineResolver):
    host = "cyberdrop.me"
    match = r'cyberdrop\.(me|to|cc|nl)/a/'

    async def resolve(self):
        page = await self.http.get(self.url)
        files = [CyberdropFileResolver.transform(href) for href in self.attrs(page.document, '#file', 'href')]
        return AlbumResult(folder_name=self.text(page.document, '#title'), resolved_urls=files)


class CyberfileMixin:
    """cyberfile.is hides the download link behind an ajax 'file details' call."""

    FILE_DETAILS = 'https://cyberfile.is/account/ajax/file_details'
    LOAD_FILES = 'https://cyberfile.is/account/ajax/load_files'

    async def _file_link(self, url):
        page = await self.http.get(url)
        file_id = find_first(r'(?<=showFileInformation\()\d+(?=\))', page.body)
        if not file_id:
            raise ResolutionError(f"No file id on {url}")
        details = await self.http.post(self.FILE_DETAILS, f'u={file_id}', headers=FORM_HEADERS)
        link = find_first(r"(?<=openUrl\(').*?(?=')", details.body)
        return link.replace('\\/', '/') if link else None


class CyberfileFileResolver(CyberfileMixin, PipelineResolver):
    host = "cyberfile.is"
    match = r'cyberfile\.is/'
    exclude = (r'cyberfile\.is/folder/',)

    async def resolve(self):
        return await self._file_link(self.url)


class CyberfileFolderResolver(CyberfileMixin, PipelineResolver):
    host = "cyberfile.is"
    match = r'cyberfile\.is/folder/'

    async def resolve(self):
        page = await self.http.get(self.url)
        scripts = self.scripts(page.document, 'data-toggle="tab"')
        node_id = find_first(r"(?<='folder',\s').*?(?=')", scripts[0] if scripts else None)
        if not node_id:
            raise ResolutionError(f"No folder node id on {self.url}")

        response = await self.http.post(self.LOAD_FILES, f'pageType=folder&nodeId={node_id}', headers=FORM_HEADERS)
        listing = self.load_json(response.body, 'cyberfile load_files')
        if not isinstance(listing, dict):
            raise ResolutionError(f"Unexpected folder listing for {self.url}")

        folder_name = basename(self.url)
        resolved = []
        if listing.get('html'):
            folder_name = listing.get('page_title') or folder_name
            for file_url in re.findall(r'(?<=dtfullurl=").*?(?=")', listing['html'], re.I | re.S):
                link = await self._file_link(file_url)
                if link:
                    resolved.append(link)

        return AlbumResult(folder_name=folder_name, resolved_urls=resolved)


class ForumAttachmentResolver(TransformResolver):
    """Attachments uploaded to the forum itself are already direct."""

    host = "simpcity.su"
    match = r'simpcity\.su/attachments'
