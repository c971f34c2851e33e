"""
Site hosts package: host signature table and the pattern matcher that applies it
"""

from .host_signatures import HOSTS, HostMatch, HostSignature, get_host
from .pattern_matcher import PatternMatcher, enabled_hosts, match_hosts

__all__ = [
    'HOSTS',
    'HostMatch',
    'HostSignature',
    'PatternMatcher',
    'enabled_hosts',
    'get_host',
    'match_hosts',
]
