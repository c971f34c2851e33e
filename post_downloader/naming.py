"""
Naming

Description: Duplicate removal, filename derivation and collision-free archive paths
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import os
from email.message import Message
from typing import Dict, List, Optional, Set

from post_downloader.models import DownloadTarget
from utils.helpers import basename as url_basename
from utils.helpers import extension, sanitize_path_component

MIME_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/png': 'png',
}

UNKNOWN_EXTENSION = 'unknown'
FALLBACK_BASENAME = 'download'


def dedupe_targets(targets: List[DownloadTarget], log=None) -> List[DownloadTarget]:
    """
    Keep one target per case-insensitive basename.

    Within a group the first target from a non-folder host wins; when all of
    them come from folder hosts the first one wins. Kept targets stay in
    document order.

    Args:
        targets: Downloadable targets in document order
        log: Optional RunLog receiving one line per dropped target

    Returns:
        List[DownloadTarget]: The kept targets
    """
    keepers: Dict[str, DownloadTarget] = {}
    for target in targets:
        if not target.downloadable:
            continue
        key = url_basename(target.url).lower()
        current = keepers.get(key)
        if current is None or (current.host.is_folder and not target.host.is_folder):
            keepers[key] = target

    kept_ids = {id(t) for t in keepers.values()}
    kept = []
    for target in targets:
        if not target.downloadable:
            continue
        if id(target) in kept_ids:
            kept.append(target)
        elif log is not None:
            log.info(f"::Skipped duplicate::: {url_basename(target.url)} ::from:: {target.url}")
    return kept


def disposition_filename(disposition: Optional[str]) -> Optional[str]:
    """Filename declared by a Content-Disposition header, if any."""
    if not disposition:
        return None
    message = Message()
    message['content-disposition'] = disposition
    filename = message.get_filename()
    return filename.strip() if filename and filename.strip() else None


def derive_basename(url: str, disposition: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Name for a downloaded file before collision handling.

    The server-declared attachment name wins over the URL path. When the name
    has no extension and the response declared a content type, the mapped
    extension (or 'unknown') is appended.
    """
    name = disposition_filename(disposition) or url_basename(url) or FALLBACK_BASENAME
    name = sanitize_path_component(name)

    if not extension(name) and content_type:
        mime = content_type.split(';')[0].strip().lower()
        name = f"{name}.{MIME_EXTENSIONS.get(mime, UNKNOWN_EXTENSION)}"
    return name


class FilenameAssigner:
    """
    Hands out run-unique basenames.

    The second 'a.jpg' becomes 'a (2).jpg', the third 'a (3).jpg', and so on.
    """

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._assigned: Set[str] = set()

    def assign(self, basename: str) -> str:
        count = self._counts.get(basename, 0) + 1
        self._counts[basename] = count

        candidate = basename
        if count > 1 or candidate in self._assigned:
            stem, ext = os.path.splitext(basename)
            number = max(count, 2)
            while True:
                candidate = f"{stem} ({number}){ext}"
                if candidate not in self._assigned:
                    break
                number += 1

        self._assigned.add(candidate)
        return candidate

    @property
    def assigned(self) -> Set[str]:
        return set(self._assigned)


def build_entry_path(basename: str, folder: Optional[str], total: int, flatten: bool = False,
                     substitute: str = '-') -> str:
    """
    Archive path of one file.

    Files only go into their album folder when the run has more than one
    target and the archive is not flattened.
    """
    folder = sanitize_path_component(folder or '', substitute)
    if folder and total > 1 and not flatten:
        return f"{folder}/{basename}"
    return basename
