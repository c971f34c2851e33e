"""
Progress

Description: Progress events emitted during a post download and the reporter interface
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FileProgressEvent:
    url: str
    host: str
    loaded: int
    total: Optional[int]
    completed: int
    total_files: int

    @property
    def fraction(self) -> Optional[float]:
        """Share of the file received, None while the size is unknown."""
        if not self.total or self.total < 0:
            return None
        return min(1.0, self.loaded / self.total)


@dataclass(frozen=True)
class FileDoneEvent:
    url: str
    host: str
    completed: int
    total_files: int
    path: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProgressReporter:
    """Receives run progress. Every method is a no-op; override what you need."""

    def status(self, message: str):
        pass

    def file_progress(self, event: FileProgressEvent):
        pass

    def file_done(self, event: FileDoneEvent):
        pass
