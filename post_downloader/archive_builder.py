"""
Archive Builder

Description: Packs downloaded files and generated extras into a single zip archive
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import io
import logging
import zipfile
from typing import Iterable, List, Optional

from post_downloader.exceptions import PackagingError
from post_downloader.models import Archive, ArchiveEntry, PostContent, RunOptions
from post_downloader.run_context import expand_filename_template
from utils.helpers import sanitize_path_component

logger = logging.getLogger("post-downloader")

LINKS_PATH = 'generated/links.txt'
LOG_PATH = 'generated/log.txt'


class ArchiveBuilder:
    """Builds deflate-compressed zip archives in memory."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def build(self, entries: Iterable[ArchiveEntry], name: str,
              links: Optional[List[str]] = None, log_text: Optional[str] = None) -> Archive:
        """
        Pack entries into one archive.

        Args:
            entries: Files to store, paths must be unique
            name: Archive file name
            links: When given, stored newline-joined as generated/links.txt
            log_text: When given, stored as generated/log.txt

        Raises:
            PackagingError: If any entry cannot be written
        """
        buffer = io.BytesIO()
        paths = []
        try:
            with zipfile.ZipFile(buffer, 'w', compression=self.compression) as archive:
                for entry in entries:
                    if entry.path in paths:
                        raise PackagingError(f"Duplicate archive path: {entry.path}")
                    archive.writestr(entry.path, entry.data)
                    paths.append(entry.path)
                if log_text is not None:
                    archive.writestr(LOG_PATH, log_text)
                    paths.append(LOG_PATH)
                if links is not None:
                    archive.writestr(LINKS_PATH, '\n'.join(links))
                    paths.append(LINKS_PATH)
        except PackagingError:
            raise
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, TypeError) as e:
            raise PackagingError(f"Failed to build {name}: {e}") from e

        logger.info("Built archive %s with %d entries", name, len(paths))
        return Archive(name=name, data=buffer.getvalue(), entry_paths=paths)


def suggest_archive_name(post: PostContent, options: RunOptions, downloadable: int,
                         custom_filename: Optional[str] = None, substitute: str = '-') -> str:
    """
    '<title> #<post number>.zip', or the expanded custom filename when the run
    has a single target and a template was supplied.
    """
    if custom_filename is None and options.custom_filename:
        custom_filename = expand_filename_template(options.custom_filename, post)

    if downloadable == 1 and custom_filename:
        name = sanitize_path_component(custom_filename, substitute)
        return name if name.lower().endswith('.zip') else f"{name}.zip"

    title = sanitize_path_component(post.thread_title, substitute)
    return f"{title} #{post.post_number}.zip".strip()
