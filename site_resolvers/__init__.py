"""
Site resolvers package: the ordered resolver registry and dispatch
"""

import logging
from typing import Optional, Sequence, Type

from .base_resolver import (BaseResolver, PipelineResolver, ResolvedResult, ResolverContext,
                            ResolverSettings, RetryPolicy, TransformResolver)
from .chevereto_resolver import (IbbAlbumResolver, IbbImageResolver, ImgKiwiAlbumResolver,
                                 ImgKiwiImageResolver, JpgChurchAlbumResolver, JpgChurchImageResolver,
                                 PixlAlbumResolver, PixlImageResolver)
from .file_host_resolvers import (AnonfilesResolver, BoxFolderResolver, BunkrAlbumResolver, BunkrFileResolver,
                                  CyberdropAlbumResolver, CyberdropFileResolver, CyberfileFileResolver,
                                  CyberfileFolderResolver, EromeAlbumResolver, ForumAttachmentResolver,
                                  PixeldrainResolver, YandexDiskResolver)
from .gofile_resolver import GofileResolver
from .image_host_resolvers import (ImagebamResolver, ImgboxGalleryResolver, ImgboxImageResolver,
                                   PixhostGalleryResolver, PixhostImageResolver, TwimgResolver)
from .social_resolvers import (ImgurDirectResolver, ImgurResolver, InstagramEmbedResolver,
                               InstagramProfileResolver, RedditResolver)
from .video_resolvers import (GfycatResolver, NoodleMagazineResolver, PornhubResolver, RedgifsResolver,
                              SaintEmbedResolver, SaintVideoResolver, SpankbangResolver)

logger = logging.getLogger("post-downloader")

# First firing resolver wins, so order matters
RESOLVERS = (
    JpgChurchImageResolver,
    JpgChurchAlbumResolver,
    IbbImageResolver,
    IbbAlbumResolver,
    PixlImageResolver,
    PixlAlbumResolver,
    PixhostImageResolver,
    PixhostGalleryResolver,
    BunkrFileResolver,
    BunkrAlbumResolver,
    PixeldrainResolver,
    AnonfilesResolver,
    PornhubResolver,
    GofileResolver,
    EromeAlbumResolver,
    CyberfileFileResolver,
    CyberfileFolderResolver,
    SaintVideoResolver,
    SaintEmbedResolver,
    RedgifsResolver,
    CyberdropFileResolver,
    CyberdropAlbumResolver,
    NoodleMagazineResolver,
    SpankbangResolver,
    ImagebamResolver,
    ImgKiwiImageResolver,
    ImgKiwiAlbumResolver,
    ForumAttachmentResolver,
    ImgboxImageResolver,
    ImgboxGalleryResolver,
    GfycatResolver,
    BoxFolderResolver,
    ImgurResolver,
    ImgurDirectResolver,
    TwimgResolver,
    YandexDiskResolver,
    InstagramEmbedResolver,
    InstagramProfileResolver,
    RedditResolver,
)


def select_resolver(resource: str,
                    resolvers: Sequence[Type[BaseResolver]] = RESOLVERS) -> Optional[Type[BaseResolver]]:
    """Return the first resolver class that fires for resource, or None."""
    for resolver in resolvers:
        if resolver.can_handle(resource):
            return resolver
    return None


async def resolve_resource(resource: str, http, passwords: Sequence[str] = (),
                           resolvers: Sequence[Type[BaseResolver]] = RESOLVERS,
                           settings: ResolverSettings = None, log=None) -> ResolvedResult:
    """
    Run the first matching resolver for one matched resource.

    Returns:
        A direct URL, an AlbumResult, or None when no resolver fires or the
        resolver found nothing. Resolver exceptions propagate to the caller.
    """
    resolver_class = select_resolver(resource, resolvers)
    if resolver_class is None:
        logger.debug("No resolver for %s", resource)
        return None

    context = ResolverContext(http=http, passwords=tuple(passwords),
                              settings=settings if settings is not None else ResolverSettings(),
                              log=log)
    resolver = resolver_class(resource, context)
    logger.debug("Resolving %r", resolver)
    return await resolver.resolve()


__all__ = [
    'BaseResolver',
    'PipelineResolver',
    'RESOLVERS',
    'ResolvedResult',
    'ResolverContext',
    'ResolverSettings',
    'RetryPolicy',
    'TransformResolver',
    'resolve_resource',
    'select_resolver',
]
