"""
GoFile Resolver

Description: Resolves gofile.io folders, including nested and password protected ones
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
"""

import hashlib
import json
from collections import deque
from typing import Optional

from post_downloader.exceptions import AuthRequiredError, ResolutionError
from post_downloader.models import AlbumResult
from site_resolvers.base_resolver import PipelineResolver
from utils.helpers import basename

API_BASE = 'https://api.gofile.io'


def hash_password(password: str) -> str:
    """GoFile expects the hex SHA-256 of the password, never the password itself."""
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


class GofileResolver(PipelineResolver):
    """
    Handler for gofile.io/d/<content id> links.

    Folders are walked breadth first with a visited set. Protected folders are
    unlocked by trying every password candidate of the post in order; the first
    accepted hash is reused for nested folders.
    """

    host = "gofile.io"
    match = r'gofile\.io/d'

    def __init__(self, url, context):
        super().__init__(url, context)
        self._password_hash: Optional[str] = None

    async def get_token(self) -> str:
        """Guest account token, created once and kept on the resolver settings."""
        if self.settings.gofile_token and self.settings.gofile_token.strip():
            return self.settings.gofile_token

        response = await self.http.get(f'{API_BASE}/createAccount')
        props = self.load_json(response.body, 'gofile createAccount')
        token = (props.get('data') or {}).get('token') if props.get('status') == 'ok' else None
        if not token:
            raise ResolutionError("Failed to create GoFile token. GoFile albums may not work.")
        self.settings.gofile_token = token
        self.context.info(f"::Created GoFile token::: {token}", self.host)
        return token

    def content_url(self, content_id: str, token: str) -> str:
        return (f'{API_BASE}/getContent?contentId={content_id}&token={token}'
                f'&websiteToken={self.settings.gofile_website_token}&cache=true')

    async def fetch_content(self, content_id: str) -> Optional[dict]:
        """
        Fetch one folder listing.

        Returns:
            dict: The API payload with status 'ok', or None when the folder is
            missing or private

        Raises:
            AuthRequiredError: When no password candidate unlocks the folder
        """
        token = await self.get_token()
        api_url = self.content_url(content_id, token)
        response = await self.http.get(api_url)
        body = response.body or ''

        if 'error-notFound' in body:
            self.context.error(f"::Album not found::: {content_id}", self.host)
            return None
        if 'error-notPublic' in body:
            self.context.error(f"::Album not public::: {content_id}", self.host)
            return None
        if 'error-passwordRequired' in body:
            return await self.unlock(api_url, content_id)

        props = self.load_json(body, 'gofile getContent')
        return props if props.get('status') == 'ok' else None

    async def unlock(self, api_url: str, content_id: str) -> dict:
        candidates = list(self.context.passwords)
        self.context.info(f"::Album requires password::: {content_id}", self.host)
        if not candidates and not self._password_hash:
            raise AuthRequiredError(f"::No passwords available::: {content_id}")

        hashes = [(None, self._password_hash)] if self._password_hash else []
        hashes += [(p, hash_password(p)) for p in candidates if hash_password(p) != self._password_hash]
        self.context.info(f"::Trying with {len(hashes)} available password(s)::", self.host)

        for password, digest in hashes:
            response = await self.http.get(f'{api_url}&password={digest}')
            try:
                props = json.loads(response.body or '')
            except ValueError:
                continue
            if props.get('status') == 'ok':
                self._password_hash = digest
                if password is not None:
                    self.context.info(f"::Successfully authenticated with:: {password}", self.host)
                return props

        raise AuthRequiredError(f"::All passwords rejected::: {content_id}")

    async def resolve(self):
        root_id = basename(self.url)
        try:
            props = await self.fetch_content(root_id)
        except AuthRequiredError as e:
            self.context.error(str(e), self.host)
            props = None
        if props is None:
            self.context.error(f"::Unable to resolve album::: {self.url}", self.host)
            return None

        folder_name = (props.get('data') or {}).get('name') or root_id
        resolved = []
        visited = {root_id}
        queue = deque([props])

        while queue:
            data = queue.popleft().get('data') or {}
            for item in (data.get('contents') or {}).values():
                if item.get('type') == 'file':
                    if item.get('link'):
                        resolved.append(item['link'])
                    continue
                child_id = item.get('code') or item.get('id')
                if not child_id or child_id in visited:
                    continue
                visited.add(child_id)
                try:
                    child = await self.fetch_content(child_id)
                except AuthRequiredError as e:
                    self.context.error(str(e), self.host)
                    continue
                if child is not None:
                    queue.append(child)

        if not resolved:
            self.context.error(f"::Empty album::: {self.url}", self.host)

        return AlbumResult(folder_name=folder_name, resolved_urls=resolved)
