"""
Output Sink

Description: Destinations for finished archives
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from post_downloader.exceptions import PackagingError
from post_downloader.models import Archive
from utils.helpers import sanitize_path_component

logger = logging.getLogger("post-downloader")


class OutputSink:
    """Receives the finished archive of a run."""

    def save(self, archive: Archive, title: str = "") -> Optional[Path]:
        raise NotImplementedError


class MemoryOutputSink(OutputSink):
    """Keeps archives in memory."""

    def __init__(self):
        self.archives: List[Archive] = []

    def save(self, archive: Archive, title: str = "") -> Optional[Path]:
        self.archives.append(archive)
        return None


class DirectoryOutputSink(OutputSink):
    """Writes <output dir>/<sanitised title>/<archive name>."""

    def __init__(self, output_dir: Union[str, Path], substitute: str = '-'):
        self.output_dir = Path(output_dir)
        self.substitute = substitute

    def target_path(self, archive: Archive, title: str = "") -> Path:
        folder = sanitize_path_component(title, self.substitute)
        directory = self.output_dir / folder if folder else self.output_dir
        return directory / sanitize_path_component(archive.name, self.substitute)

    def save(self, archive: Archive, title: str = "") -> Path:
        path = self.target_path(archive, title)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(archive.data)
        except OSError as e:
            raise PackagingError(f"Could not write {path}: {e}") from e
        logger.info("Saved %s (%d bytes)", path, len(archive.data))
        return path
