"""
Models

Description: Records passed between matching, resolution, transfer and packaging
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

from dataclasses import dataclass, field, fields
from typing import Any, List, Mapping, Optional

from site_hosts.host_signatures import HostSignature


@dataclass
class PostContent:
    """Raw post fragment plus the metadata the content source knows about it."""

    content: str
    post_id: str
    post_number: str = ""
    thread_title: str = ""
    passwords: List[str] = field(default_factory=list)

    def password_candidates(self) -> List[str]:
        """Passwords as given, then lower-cased variants, without repeats."""
        candidates = []
        for password in self.passwords + [p.lower() for p in self.passwords]:
            if password and password not in candidates:
                candidates.append(password)
        return candidates


# camelCase names used by exported settings and older config files
_OPTION_ALIASES = {
    'generateLinks': 'generate_links',
    'generateLog': 'generate_log',
    'skipDuplicates': 'skip_duplicates',
    'skipDownload': 'skip_download',
    'customFilename': 'custom_filename',
    'customFilenameTemplate': 'custom_filename',
    'custom_filename_template': 'custom_filename',
}


@dataclass
class RunOptions:
    """Per-run switches. Unknown keys in from_mapping are ignored."""

    flatten: bool = False
    generate_links: bool = False
    generate_log: bool = False
    skip_duplicates: bool = True
    skip_download: bool = False
    custom_filename: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "RunOptions":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (values or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class AlbumResult:
    """Album resolution: several URLs saved under one folder."""

    folder_name: Optional[str]
    resolved_urls: List[str]


@dataclass(frozen=True)
class DownloadTarget:
    url: Optional[str]
    host: HostSignature
    original_resource: str
    folder_name: Optional[str] = None

    @property
    def downloadable(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class TransferResult:
    """Outcome of one final download task."""

    target: DownloadTarget
    data: Optional[bytes] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


@dataclass(frozen=True)
class ArchiveEntry:
    path: str
    data: bytes


@dataclass
class TransferSummary:
    total: int
    completed: int = 0
    succeeded: int = 0
    failed: int = 0
    entries: List[ArchiveEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Archive:
    name: str
    data: bytes
    entry_paths: List[str]
