"""
Run Context

Description: Per-run state (options, log transcript) and the registry of in-progress runs
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from post_downloader.models import PostContent, RunOptions

logger = logging.getLogger("post-downloader")

SEPARATOR = '-' * 40


class RunLog:
    """
    Log of one post download.

    Every message goes to the module logger and is kept in a transcript that can
    be written into the archive as generated/log.txt.
    """

    def __init__(self, post_id: str, post_number: str = ""):
        self.post_id = post_id
        self.post_number = post_number
        self.lines: List[str] = []

    def _prefix(self, source: str = None) -> str:
        label = source or (f"#{self.post_number}" if self.post_number else self.post_id)
        return f"[{label}]"

    def info(self, message: str, source: str = None):
        line = f"{self._prefix(source)} {message}"
        self.lines.append(line)
        logger.info("%s %s", self.post_id, line)

    def error(self, message: str, source: str = None):
        line = f"{self._prefix(source)} ERROR {message}"
        self.lines.append(line)
        logger.error("%s %s", self.post_id, line)

    def separator(self):
        self.lines.append(SEPARATOR)

    def transcript(self) -> str:
        return '\n'.join(self.lines)


@dataclass
class RunContext:
    """Everything one download_post call threads through resolution and transfer."""

    post: PostContent
    options: RunOptions
    log: RunLog = None
    custom_filename: str = None

    def __post_init__(self):
        if self.log is None:
            self.log = RunLog(self.post.post_id, self.post.post_number)
        if self.custom_filename is None and self.options.custom_filename:
            self.custom_filename = expand_filename_template(self.options.custom_filename, self.post)


def expand_filename_template(template: str, post: PostContent) -> str:
    """Expand :title:, :#: and :id: placeholders."""
    return (template
            .replace(':title:', post.thread_title or '')
            .replace(':#:', str(post.post_number or ''))
            .replace(':id:', str(post.post_id or '')))


@dataclass
class RunRegistry:
    """
    Post id -> in-progress flag, kept across runs so front ends can warn before exiting.

    A run cancelled while marked in progress is remembered in `interrupted`
    after its flag has been cleared.
    """

    runs: Dict[str, bool] = field(default_factory=dict)
    interrupted: Set[str] = field(default_factory=set)

    def set_processing(self, post_id: str, processing: bool):
        self.runs[post_id] = processing

    def is_processing(self, post_id: str) -> bool:
        return self.runs.get(post_id, False)

    def mark_interrupted(self, post_id: str):
        if self.is_processing(post_id):
            self.interrupted.add(post_id)

    def interrupted_runs(self) -> List[str]:
        """Post ids cut off mid-transfer, plus any still marked in progress."""
        still_running = {post_id for post_id, processing in self.runs.items() if processing}
        return sorted(self.interrupted | still_running)


run_registry = RunRegistry()
