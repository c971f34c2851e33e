"""
String Helpers

Description: Small URL, filename and regex helpers shared by resolvers and the downloader
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import os
import re
from typing import List, Optional
from urllib.parse import unquote


def basename(url: str) -> str:
    """
    Last path segment of a URL, without query string or fragment.

    Args:
        url (str): Absolute or relative URL

    Returns:
        str: The segment (trailing slashes ignored), '' for empty input
    """
    if not url:
        return ""
    cleaned = re.sub(r'[?#].*$', '', url, flags=re.S)
    return unquote(cleaned.rstrip('/').split('/')[-1]) if cleaned.rstrip('/') else ""


def extension(filename: str) -> str:
    """Lower-cased extension without the dot ('' when missing)."""
    ext = os.path.splitext(filename)[1]
    return ext[1:].lower() if ext else ""


def limit(text: str, length: int) -> str:
    """Ellipsize text longer than length."""
    if text is None:
        return ""
    return text if len(text) <= length else f"{text[:length]}..."


def find_all(pattern: str, text: Optional[str], flags=re.I | re.S) -> List[str]:
    """Return every full match of pattern in text (empty list for empty text)."""
    if not text:
        return []
    return [m.group(0) for m in re.finditer(pattern, text, flags)]


def find_first(pattern: str, text: Optional[str], flags=re.I | re.S) -> Optional[str]:
    matches = find_all(pattern, text, flags)
    return matches[0] if matches else None


def strip_thumbnail_suffix(url: str) -> str:
    """Chevereto style '.th.' / '.md.' thumbnail markers to the original image."""
    return re.sub(r'\.(?:th|md)(?=\.)', '', url)


def sanitize_path_component(name: str, substitute: str = '-') -> str:
    """Replace path separators so a title can be used as a single path component."""
    return re.sub(r'[\\/]', substitute, name or "").strip()
