"""
Post downloader package: run models, naming, transfer orchestration and packaging

Import download_post from post_downloader.orchestrator; it is not re-exported here
because the resolvers import this package's models and exceptions.
"""

from .exceptions import (AuthRequiredError, PackagingError, PostDownloaderError, ResolutionError,
                         TransferError, TransientUpstreamError)
from .models import PostContent, RunOptions

__all__ = [
    'AuthRequiredError',
    'PackagingError',
    'PostContent',
    'PostDownloaderError',
    'ResolutionError',
    'RunOptions',
    'TransferError',
    'TransientUpstreamError',
]
