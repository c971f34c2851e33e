"""
Pattern Matcher

Description: Finds host resource references inside a post fragment
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from site_hosts.host_signatures import HOSTS, HostMatch, HostSignature

CUSTOM_MARKER = '!!'
OPTION_NO_QS = '<no_qs>'
OPTION_KEEP_TS = '<keep_ts>'
PLACEHOLDERS = {
    '~an@': 'a-zA-Z0-9',
}
ATTRIBUTES = ('href', 'src', 'data-url')


@dataclass(frozen=True)
class CompiledMatcher:
    """One host pattern after option stripping, placeholder expansion and prefixing."""

    regex: re.Pattern
    custom: bool
    strip_query: bool
    keep_trailing_slash: bool

    @classmethod
    def compile(cls, pattern: str) -> "CompiledMatcher":
        custom = CUSTOM_MARKER in pattern
        strip_query = OPTION_NO_QS in pattern
        keep_trailing_slash = OPTION_KEEP_TS in pattern

        source = pattern.replace(CUSTOM_MARKER, '').replace(OPTION_NO_QS, '').replace(OPTION_KEEP_TS, '')
        for placeholder, expansion in PLACEHOLDERS.items():
            source = source.replace(placeholder, expansion)

        if not custom:
            attributes = '|'.join(re.escape(a) for a in ATTRIBUTES)
            source = (
                rf'(?<![\w-])(?:{attributes})\s*=\s*(?P<quote>["\'])'
                rf'(?P<resource>https?://(?:www\.)?(?:{source})(?:(?!(?P=quote)).)*)(?P=quote)'
            )
        return cls(
            regex=re.compile(source, re.I | re.S),
            custom=custom,
            strip_query=strip_query,
            keep_trailing_slash=keep_trailing_slash,
        )

    def finditer(self, content: str) -> Iterable[Tuple[int, str]]:
        """Yield (position, cleaned resource) pairs in document order."""
        for match in self.regex.finditer(content):
            if self.custom:
                position, resource = match.start(), match.group(0)
            else:
                position, resource = match.start('resource'), match.group('resource')
            resource = self._clean(resource)
            if resource:
                yield position, resource

    def _clean(self, resource: str) -> str:
        resource = resource.strip()
        if self.strip_query:
            resource = re.sub(r'\?.*$', '', resource, flags=re.S)
        if not self.keep_trailing_slash:
            resource = resource.rstrip('/')
        return resource


class PatternMatcher:
    """
    Scans post fragments for every host in a signature table.

    Patterns are compiled once per matcher instance. A resource is attributed to
    every host whose patterns fire; enabling or disabling hosts is up to the caller.
    """

    def __init__(self, hosts: Sequence[HostSignature] = HOSTS):
        self.hosts = tuple(hosts)
        self._compiled = [
            (host, [CompiledMatcher.compile(p) for p in host.matchers if p])
            for host in self.hosts
        ]

    def match(self, content: Optional[str]) -> List[HostMatch]:
        """
        Find resources per host.

        Args:
            content (str): The post HTML fragment

        Returns:
            List[HostMatch]: Hosts with at least one resource, in table order; resources
            are distinct and in document order
        """
        if not content:
            return []

        matches = []
        for host, matchers in self._compiled:
            found = []
            for matcher in matchers:
                found.extend(matcher.finditer(content))
            found.sort(key=lambda item: item[0])

            resources = []
            for _, resource in found:
                if resource not in resources:
                    resources.append(resource)
            if resources:
                matches.append(HostMatch(host=host, resources=resources))
        return matches


_default_matcher: Optional[PatternMatcher] = None


def match_hosts(content: str, hosts: Sequence[HostSignature] = None) -> List[HostMatch]:
    """Convenience wrapper using a shared matcher for the default host table."""
    global _default_matcher
    if hosts is not None:
        return PatternMatcher(hosts).match(content)
    if _default_matcher is None:
        _default_matcher = PatternMatcher()
    return _default_matcher.match(content)


def enabled_hosts(matches: List[HostMatch], disabled: Iterable[str] = ()) -> List[HostMatch]:
    """
    Apply the caller's host selection.

    Hosts can be disabled by name ('gofile.io') or by full signature ('imgur.com:image').
    """
    disabled = {d.lower() for d in disabled}
    selected = []
    for host_match in matches:
        if host_match.host.name.lower() in disabled or str(host_match.host).lower() in disabled:
            host_match.enabled = False
        if host_match.enabled and host_match.resources:
            selected.append(host_match)
    return selected
