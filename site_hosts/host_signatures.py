"""
Host Signatures

Description: Table of hosting services and the patterns that detect their links inside a post
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

r"""
Every host is declared as ("name:category", [single_pattern, album_pattern]).

The first pattern matches a single resource (an image or a video), the optional
second one a folder or album. A pattern is matched against the values of the
href, src and data-url attributes and is implicitly prefixed with
https?://(www.)?, so it must not describe the attribute itself.

A pattern containing !! anywhere is used as-is (marker removed) against the
whole post fragment:

    r'!!https://cyberfile\.is/\w+(?=")'

Options, placed anywhere in a pattern:

    <no_qs>    remove the query string from matches
    <keep_ts>  keep the trailing slash (it is removed otherwise)

Placeholders:

    ~an@       a-zA-Z0-9

An empty category marks a generic file/folder host.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class HostSignature:
    name: str
    category: str
    matchers: Tuple[str, ...]

    @classmethod
    def from_signature(cls, signature: str, matchers) -> "HostSignature":
        name, _, category = signature.partition(':')
        return cls(name=name, category=category, matchers=tuple(matchers))

    @property
    def is_folder(self) -> bool:
        """Generic file/folder hosts carry no category."""
        return not self.category

    def __str__(self):
        return f"{self.name}:{self.category}"


@dataclass
class HostMatch:
    """Resources the matcher attributed to one host signature."""

    host: HostSignature
    resources: List[str] = field(default_factory=list)
    enabled: bool = True


_HOST_TABLE = [
    ('simpcity.su:Attachments', [r'simpcity\.su/attachments']),
    ('anonfiles.com:', [r'anonfiles\.com']),
    ('jpg.church:image', [r'simp\d+\.jpg\.church/', r'jpg\.church/a/[~an@_.-]+<no_qs>']),
    ('ibb.co:image', [r'!!https?://(www\.)?([a-z](\d+)?\.)?ibb\.co/([~an@_.-])+(?=")', r'ibb\.co/album/[~an@_.-]+']),
    ('img.kiwi:image', [r'img\.kiwi/image/', r'img\.kiwi/album/']),
    ('imgbox.com:image', [r'(thumbs|images)(\d+)?\.imgbox\.com/', r'imgbox\.com/g/']),
    ('imgur.com:Media', [
        r'!!https:(/|\\/){2}s9e\.github\.io(/|\\/)iframe(/|\\/)2(/|\\/)imgur.*?(?="|&quot;)'
        r'|(?<=")https://(www\.)?imgur\.(com|io).*?(?=")',
    ]),
    ('imgur.com:image', [r'\w+\.imgur\.(com|io)']),
    ('reddit.com:image', [r'(\w+)?\.redd\.it']),
    ('instagram.com:Media', [r'!!https:(/|\\/){2}s9e\.github\.io(/|\\/)iframe(/|\\/)2(/|\\/)instagram.*?(?="|&quot;)']),
    ('instagram.com:Profile', [r'!!instagram\.com/[~an@_.-]+|((instagram|insta):(\s+)?)@?[~an@_.-]+']),
    ('twitter.com:image', [r'([~an@.]+)?twimg\.com/']),
    ('pixl.is:image', [r'([a-z](\d+)\.)pixl\.(is|to)/((img|image)/)?', r'pixl\.(is|to)/album/']),
    ('pixhost.to:image', [r't(\d+)?\.pixhost\.to/', r'pixhost\.to/gallery/']),
    ('imagebam.com:image', [r'imagebam\.com/(view|gallery)']),
    ('saint.to:video', [r'(saint\.to/embed/|([~an@]+\.)?saint\.to/videos)']),
    ('redgifs.com:video', [r'!!redgifs\.com(/|\\/)ifr.*?(?="|&quot;)']),
    ('gfycat.com:video', [r'!!gfycat\.com(/|\\/)ifr.*?(?="|&quot;)']),
    ('bunkr.is:', [r'(stream|cdn(\d+)?|i(\d+)?)\.bunkr\.is/(v/)?', r'bunkr\.is/a/']),
    ('pixeldrain.com:', [r'pixeldrain\.com/[lu]/']),
    ('gofile.io:', [r'gofile\.io/d']),
    ('erome.com:', [r'erome\.com/a/']),
    ('box.com:', [r'm\.box\.com/']),
    ('yandex.ru:', [r'(disk\.)?yandex\.[a-z]+']),
    ('cyberfile.is:', [r'!!https://cyberfile\.is/\w+(?=")', r'cyberfile\.is/folder/']),
    ('cyberdrop.me:', [r'fs-\d+\.cyberdrop\.(me|to|cc|nl)/', r'cyberdrop\.(me|to|cc|nl)/a/']),
    ('pornhub.com:video', [r'([~an@]+\.)?pornhub\.com/view_video']),
    ('noodlemagazine.com:video', [r'(adult\.)?noodlemagazine\.com/watch/']),
    ('spankbang.com:video', [r'spankbang\.com/.*?/video']),
]

HOSTS: Tuple[HostSignature, ...] = tuple(
    HostSignature.from_signature(signature, matchers) for signature, matchers in _HOST_TABLE
)


def get_host(name: str, category: str = None) -> HostSignature:
    """Look up a host by name (and category when a name appears more than once)."""
    for host in HOSTS:
        if host.name == name and (category is None or host.category == category):
            return host
    raise KeyError(f"Unknown host: {name}")
