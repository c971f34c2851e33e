"""
Exceptions

Description: Error taxonomy for resolution, transfer and packaging failures
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""


class PostDownloaderError(Exception):
    """Base class for every error raised by the downloader."""


class ResolutionError(PostDownloaderError):
    """A resolver could not turn a resource into a download URL. The resource is skipped."""


class TransientUpstreamError(ResolutionError):
    """An upstream answered with something unusable that may succeed on a later attempt."""


class AuthRequiredError(ResolutionError):
    """A gated resource rejected every candidate password."""


class TransferError(PostDownloaderError):
    """A final file download failed. Counted as completed, left out of the archive."""


class PackagingError(PostDownloaderError):
    """The archive could not be assembled. Aborts the run."""
